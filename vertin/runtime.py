"""
Vertin runtime: glue the matcher, the parser and the handlers together.

What this module provides
- App: validated application (metadata + command forest + settings) with
  run(prompt) as its single entry point.
- Context: what a handler receives: the parsed values plus the selected
  command, the walked path and the effective version.
- execute(...): one invocation (match, parse, dispatch), shared by App.run and
  Command.__invoke__.
- invoke(object, prompt): convenience runner for apps, commands or callables.

Prompt forms (tokenize)
- Unset: sys.argv, scanning from index 1 (skips the program path).
- str: split with shlex.split, scanning from index 0.
- Iterable[str]: used as-is, scanning from index 0.

Fault flow
- The matcher, the parser and the handlers raise CommandException subclasses.
- execute() surfaces them through faults.trigger() with the presentation
  settings (prog, shell, fancy, colorful): raised as-is outside shell mode,
  rendered on stderr followed by exit status 1 in shell mode.
"""
import asyncio
import collections
import difflib
import inspect
import logging
import shlex
import sys
from collections.abc import Iterable

from .commands import Command, command, validate_commands, validate_root_command
from .diagnostics import enable_debug
from .faults import CommandException, UnknownCommandError, trigger
from .matcher import match_commands
from .options import UNKNOWN_POLICIES
from .parser import Parser
from .utils import *

logger = logging.getLogger(__name__)

SWITCHES = (
    "resolve_alias",
    "resolve_flag_after_argument",
    "resolve_unknown",
)


class Context(collections.namedtuple("Context", (
    "arguments",
    "flags",
    "unknown_flags",
    "unknown_arguments",
    "command",
    "path",
    "version",
))):
    """
    Handler input.

    - arguments, flags, unknown_flags, unknown_arguments: see parser.ParsedResult.
    - command: the selected Command.
    - path: tuple of the exec names walked to reach it (empty for the root).
    - version: the command version, or the app version when it has none.
    """
    __slots__ = ()


def tokenize(prompt=Unset, /):
    """
    Normalize a prompt into (tokens, start) (see module docstring).
    """
    if prompt is Unset:
        return list(sys.argv), 1
    if isinstance(prompt, str):
        return shlex.split(prompt), 0
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("prompt must be a string or an iterable of strings")
        return tokens, 0
    raise TypeError("prompt must be a string or an iterable of strings")


def _unknown_command(tokens, start, commands, /):
    """
    Build the fault for an invocation no command (and no root) accepts.
    """
    names = [command.exec_name for command in commands]
    if start >= len(tokens):
        return UnknownCommandError(
            "no command given",
            hint="available commands: %s" % ", ".join(names),
        )
    token = tokens[start]
    if matches := difflib.get_close_matches(token, names, n=1):
        hint = "did you mean %r?" % matches[0]
    else:
        hint = "available commands: %s" % ", ".join(names)
    return UnknownCommandError("unknown command %r" % token, token=token, hint=hint)


def _dispatch(handler, context, /):
    result = handler(context)
    if inspect.iscoroutine(result):
        logger.debug("handler returned a coroutine, running it to completion")
        result = asyncio.run(result)
    return result


def execute(tokens, commands, root=None, start=0, /, *, version=None, parsers=Unset, **settings):
    """
    Run one invocation: match a command, parse its tokens, call its handler.

    Parameters
    - tokens, commands, root, start: forwarded to matcher.match_commands().
    - version: fallback version for commands without one.
    - parsers: optional dict cache of command → Parser.
    - settings: parser switches (resolve_alias, resolve_flag_after_argument,
      resolve_unknown) and presentation options (prog, shell, fancy, colorful).

    Returns
    - whatever the handler returns (awaited first when it is a coroutine).
    """
    switches = {name: settings.pop(name) for name in SWITCHES if name in settings}
    parsers = coalesce(parsers, {})

    try:
        match = match_commands(tokens, commands, root, start)
        if match.command is None:
            raise _unknown_command(tokens, start, commands)

        if (parser := parsers.get(match.command)) is None:
            parser = parsers[match.command] = Parser(match.command.options.__replace__(**switches))
            logger.debug("built parser for %r", match.command.exec_name)

        parsed = parser(match.remaining)
        context = Context(
            *parsed,
            command=match.command,
            path=match.path,
            version=match.command.version or version,
        )
        logger.debug("dispatching %r with %r", match.command.exec_name, parsed)
        return _dispatch(match.command.handler, context)
    except CommandException as fault:
        return trigger(fault, **settings)


class App:
    """
    A validated command-line application.

        >>> app = App("tool", "does things", "1.0.0", commands=[build, clean])
        >>> app.run("build --release")

    Parameters
    - name, descr, version: non-empty strings (positional-only).
    - root: optional root (fallback) command, see commands.rootcommand.
    - commands: a Command or an iterable of top-level commands.
    - resolve_alias, resolve_flag_after_argument, resolve_unknown: parser
      switches applied to every command.
    - shell, fancy, colorful: fault presentation (see faults.CommandException).
    - verbose: attach the debug log handler (see diagnostics.enable_debug).

    Raises
    - TypeError/ValueError on invalid metadata, switches or command forest.
    """
    __slots__ = (
        "_name",
        "_descr",
        "_version",
        "_root",
        "_commands",
        "_switches",
        "_presentation",
        "_parsers",
    )

    name = mirror("name")
    descr = mirror("descr")
    version = mirror("version")
    root = mirror("root")
    commands = mirror("commands")

    def __init__(
            self,
            name,
            descr,
            version,
            /,
            root=Unset,
            commands=(),
            *,
            resolve_alias=True,
            resolve_flag_after_argument=True,
            resolve_unknown="ignore",
            shell=False,
            fancy=False,
            colorful=False,
            verbose=False,
    ):
        for field, object in (("name", name), ("descr", descr), ("version", version)):
            if not isinstance(object, str):
                raise TypeError(f"app {field!r} must be a string")
            elif not object.strip():
                raise ValueError(f"app {field!r} cannot be empty")

        if isinstance(commands, Command):
            commands = (commands,)
        elif not isinstance(commands, Iterable):
            raise TypeError("app 'commands' must be a command or an iterable of commands")
        commands = tuple(commands)

        if root is Unset and not commands:
            raise ValueError("app must have a root command or at least one command")
        if root is not Unset:
            validate_root_command(root)
        validate_commands(commands)

        if resolve_unknown not in UNKNOWN_POLICIES:
            raise ValueError("app 'resolve_unknown' must be one of 'ignore', 'include', or 'block'")

        self._name = name.strip()
        self._descr = descr.strip()
        self._version = version.strip()
        self._root = coalesce(root)
        self._commands = commands
        self._switches = {
            "resolve_alias": bool(resolve_alias),
            "resolve_flag_after_argument": bool(resolve_flag_after_argument),
            "resolve_unknown": resolve_unknown,
        }
        self._presentation = {
            "prog": self._name,
            "shell": bool(shell),
            "fancy": bool(fancy),
            "colorful": bool(colorful),
        }
        self._parsers = {}

        if verbose:
            enable_debug()

    def run(self, prompt=Unset):
        """
        Run the application (see module docstring for prompt forms).
        """
        tokens, start = tokenize(prompt)
        return execute(
            tokens,
            self._commands,
            self._root,
            start,
            version=self._version,
            parsers=self._parsers,
            **self._switches,
            **self._presentation,
        )

    def __invoke__(self, prompt=Unset):
        return self.run(prompt)

    def __rich_repr__(self):
        yield "name", self._name
        yield "descr", self._descr
        yield "version", self._version
        yield "root", self._root
        yield "commands", self._commands

    def __repr__(self):
        return f"app({', '.join('%s=%r' % item for item in self.__rich_repr__())})"


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for apps, commands or plain callables.

    - object implementing __invoke__: called with prompt.
    - plain callable: wrapped into a Command (its own fallback) and invoked.

    Returns
    - whatever the selected handler returns.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    if callable(object):
        return invoke(command(object), prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "App",
    "Context",
    "execute",
    "tokenize",
    "invoke",
)
