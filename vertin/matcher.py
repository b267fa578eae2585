"""
Vertin command matcher: select the handling command by walking the tree.

Rules
- Matching is exact on exec_name (no prefixes, no case folding).
- Siblings are scanned in declaration order; the first hit wins.
- A node with children tries to go deeper; a deeper match wins, otherwise the
  node itself is the match.
- When nothing matches, the root command (if any) handles the whole input
  from the start index, and the partial path walked so far is discarded.

The matcher never raises on unmatched input; deciding what an unmatched
invocation means is left to the runtime.
"""
import collections
import logging

from .faults import ConfigurationError

logger = logging.getLogger(__name__)


class CommandMatch(collections.namedtuple("CommandMatch", ("command", "remaining", "path"))):
    """
    Outcome of a match.

    - command: the selected Command, or None.
    - remaining: tuple of the tokens left for the parser.
    - path: tuple of the exec names walked to reach the command.
    """
    __slots__ = ()

    def __bool__(self):
        return self.command is not None


def dfs_match(tokens, commands, index=0, path=(), /):
    """
    Depth-first walk of commands against tokens, starting at tokens[index].
    """
    return _walk(tuple(tokens), commands, index, tuple(path))


def _walk(tokens, commands, index, path, /):
    """
    Recursive step of dfs_match(); tokens and path are tuples already.
    """
    if index >= len(tokens):
        return CommandMatch(None, (), path)

    token = tokens[index]
    for command in commands:
        if command.exec_name != token:
            continue
        walked = path + (token,)
        if command.children:
            deeper = _walk(tokens, command.children, index + 1, walked)
            if deeper:
                return deeper
        logger.debug("matched %r at index %d (path %r)", token, index, walked)
        return CommandMatch(command, tokens[index + 1:], walked)

    logger.debug("no command named %r at index %d", token, index)
    return CommandMatch(None, tokens[index:], path)


def match_commands(tokens, commands, root=None, start=2, /):
    """
    Match tokens against the top-level commands, falling back to the root command.

    Parameters
    - tokens: the full token sequence (e.g., sys.argv).
    - commands: top-level commands, in declaration order.
    - root: optional fallback command.
    - start: index of the first token to consider.

    Raises
    - ConfigurationError: when there are neither commands nor a root command.
    """
    tokens, commands = tuple(tokens), tuple(commands)
    if not commands and root is None:
        raise ConfigurationError(
            "no commands available for matching",
            hint="register at least one command or a root command",
        )

    if not commands:
        logger.debug("no top-level commands, using the root command")
        return CommandMatch(root, tokens[start:], ())

    result = _walk(tokens, commands, start, ())
    if not result and root is not None:
        logger.debug("falling back to the root command (walked %r)", result.path)
        return CommandMatch(root, tokens[start:], ())
    return result


__all__ = (
    "CommandMatch",
    "dfs_match",
    "match_commands",
)
