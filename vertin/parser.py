"""
Vertin parser engine: a small tokenizing state machine.

What this module provides
- ParsedResult: (arguments, flags, unknown_flags, unknown_arguments), all four
  always present.
- ParserState: the mutable value threaded through each parsing step; one per
  parse call, never shared.
- Step functions: parse_flag(state, tokens) and parse_argument(state, tokens)
  take a state and return it after consuming one token (two for a value-bearing
  flag, a run of tokens for a multi-count positional).
- parse(tokens, context): the main loop plus the final required-parameter check.
- Parser / create_parser(options): a reusable, callable parser closed over one
  ParserContext.

Token grammar
- a token starting with '-' is a flag token; the name is the token without its
  leading '--' (or '-'): '--dry-run' → 'dry-run', '-v' → 'v', '-' → ''.
- any other token is an argument token.

Faults (all raised synchronously, see vertin.faults)
- UnknownFlagError / UnexpectedArgumentError: unknown tokens under "block".
- MissingValueError: a value-bearing flag is the last token.
- FlagAfterArgumentError: a flag follows an argument while
  resolve_flag_after_argument is False.
- MissingRequiredError: a required parameter is still unset after all tokens.
- InvalidValueError: a resolver rejected a token (ValueError/TypeError).
"""
import collections
import logging
from collections.abc import Iterable

from .context import ParserContext, create_parser_context
from .faults import *
from .options import ParserOptions
from .resolvers import resolve_value
from .utils import *

logger = logging.getLogger(__name__)


class ParsedResult(collections.namedtuple("ParsedResult", (
    "arguments",
    "flags",
    "unknown_flags",
    "unknown_arguments",
))):
    """
    Outcome of one parse call.

    - arguments: dict[name, value] of resolved positionals (defaults included).
    - flags: dict[canonical name, value] of resolved flags (defaults included).
    - unknown_flags: dict[stripped name, raw token] collected under "include".
    - unknown_arguments: list[raw token] collected under "include".
    """
    __slots__ = ()


class ParserState:
    """
    Mutable parsing progress for a single parse call.

    - cursor: index of the next token to consume.
    - argument_cursor: index of the next declared positional to fill.
    - seen_argument: whether an argument token was consumed yet.
    - result: the ParsedResult being accumulated.
    - context: the shared, read-only ParserContext.
    - names, arguments, flags, lookup: the declared positional names and the
      spec and alias tables, read once from the context.
    """
    __slots__ = (
        "cursor",
        "argument_cursor",
        "seen_argument",
        "result",
        "context",
        "names",
        "arguments",
        "flags",
        "lookup",
    )

    def __init__(self, context, /):
        self.cursor = 0
        self.argument_cursor = 0
        self.seen_argument = False
        self.context = context
        self.arguments = context.options.arguments
        self.flags = context.options.flags
        self.lookup = context.flag_lookup
        self.names = tuple(self.arguments)
        self.result = ParsedResult(
            dict(context.argument_defaults),
            dict(context.flag_defaults),
            {},
            [],
        )

    def __repr__(self):
        return (f"parser-state(cursor={self.cursor!r}, argument_cursor={self.argument_cursor!r}, "
                f"seen_argument={self.seen_argument!r}, result={self.result!r})")


def create_initial_state(context, /):
    """
    Fresh state with result maps pre-populated from the context defaults.
    """
    if not isinstance(context, ParserContext):
        raise TypeError("create_initial_state() argument must be a parser context")
    return ParserState(context)


def is_flag(token, /):
    return token.startswith("-")


def extract_flag_name(token, /):
    """
    Strip the leading '--' (or '-') from a flag token.
    """
    return token[2:] if token.startswith("--") else token[1:]


def _resolve(state, token, parameter, kind, name, /):
    """
    Resolve a token through a parameter's resolver, naming the parameter on failure.
    """
    try:
        return resolve_value(token, parameter.resolver)
    except (ValueError, TypeError) as error:
        raise InvalidValueError(
            "invalid value %r for %s %r at %s position" % (token, kind, name, ordinal(state.cursor + 1)),
            token=token,
            name=name,
            index=state.cursor,
            hint=str(error) or "check the value given to %r" % name,
        ) from error


def _unknown(state, policy, fault, /):
    """
    Apply the unknown-token policy; returns True when the token must be collected.
    """
    match policy:
        case "block":
            raise fault
        case "include":
            return True
        case _:
            return False


def parse_flag(state, tokens, /):
    """
    Consume the flag token at state.cursor (and its value, when it takes one).
    """
    context = state.context
    token = tokens[state.cursor]
    name = extract_flag_name(token)
    canonical = state.lookup.get(name)

    if canonical is None:
        logger.debug("unknown flag %r at index %d (policy %r)", token, state.cursor, context.options.resolve_unknown)
        if _unknown(state, context.options.resolve_unknown, UnknownFlagError(
            "unknown flag %r at %s position" % (token, ordinal(state.cursor + 1)),
            token=token,
            name=name,
            index=state.cursor,
            hint="remove it or check the spelling of the flag",
        )):
            state.result.unknown_flags[name] = token
        state.cursor += 1
        return state

    flag = state.flags[canonical]

    if flag.boolean:
        logger.debug("flag %r resolved to %r (presence)", token, canonical)
        state.result.flags[canonical] = True
        state.cursor += 1
        return state

    if state.cursor + 1 >= len(tokens):
        raise MissingValueError(
            "flag %r at %s position requires a value" % (token, ordinal(state.cursor + 1)),
            token=token,
            name=canonical,
            index=state.cursor,
            hint="pass the value after a space (for example: %s <value>)" % token,
        )

    state.cursor += 1
    value = _resolve(state, tokens[state.cursor], flag, "flag", canonical)
    logger.debug("flag %r resolved to %r = %r", token, canonical, value)
    state.result.flags[canonical] = value
    state.cursor += 1
    return state


def parse_argument(state, tokens, /):
    """
    Consume the argument token(s) at state.cursor into the next declared positional.
    """
    context = state.context
    state.seen_argument = True

    if state.argument_cursor >= len(state.names):
        token = tokens[state.cursor]
        logger.debug("excess argument %r at index %d (policy %r)", token, state.cursor, context.options.resolve_unknown)
        if _unknown(state, context.options.resolve_unknown, UnexpectedArgumentError(
            "unexpected argument %r at %s position" % (token, ordinal(state.cursor + 1)),
            token=token,
            index=state.cursor,
            hint="remove the extra input",
        )):
            state.result.unknown_arguments.append(token)
        state.cursor += 1
        return state

    name = state.names[state.argument_cursor]
    argument = state.arguments[name]

    if argument.greedy:
        values = []
        while state.cursor < len(tokens):
            values.append(_resolve(state, tokens[state.cursor], argument, "argument", name))
            state.cursor += 1
        logger.debug("argument %r captured %d remaining tokens", name, len(values))
        state.result.arguments[name] = values
        return state

    values = []
    while len(values) < argument.count and state.cursor < len(tokens):
        values.append(_resolve(state, tokens[state.cursor], argument, "argument", name))
        state.cursor += 1

    logger.debug("argument %r took %d of %d tokens", name, len(values), argument.count)
    state.result.arguments[name] = values[0] if argument.count == 1 else values
    state.argument_cursor += 1
    return state


def validate_required_parameters(state, /):
    """
    Fail on the first required positional, then flag, that is still unset.
    """
    for name, argument in state.arguments.items():
        if argument.required and name not in state.result.arguments:
            raise MissingRequiredError(
                "required argument %r is missing" % name,
                name=name,
                hint="pass a value for %r" % name,
            )
    for name, flag in state.flags.items():
        if flag.required and name not in state.result.flags:
            raise MissingRequiredError(
                "required flag %r is missing" % name,
                name=name,
                hint="pass --%s%s" % (name, "" if flag.boolean else " <value>"),
            )


def parse(tokens, context, /):
    """
    Parse a token sequence against a context and return a ParsedResult.

    Terminates for every input: each step moves the cursor forward by at least one.
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("parse() first argument must be an iterable of strings")
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("parse() first argument must be an iterable of strings")

    state = create_initial_state(context)
    while state.cursor < len(tokens):
        token = tokens[state.cursor]
        if is_flag(token):
            if state.seen_argument and not context.options.resolve_flag_after_argument:
                raise FlagAfterArgumentError(
                    "flag %r at %s position cannot appear after arguments" % (token, ordinal(state.cursor + 1)),
                    token=token,
                    index=state.cursor,
                    hint="move %r before the first argument" % token,
                )
            state = parse_flag(state, tokens)
        else:
            state = parse_argument(state, tokens)

    validate_required_parameters(state)
    return state.result


class Parser:
    """
    Reusable parser: the context is built once, each call parses independently.

        >>> parser = create_parser(ParserOptions(flags={"verbose": Flag(bool, alias="v")}))
        >>> parser(["-v"]).flags
        {'verbose': True}
    """
    __slots__ = ("_context",)

    context = mirror("context")

    def __init__(self, options, /):
        self._context = create_parser_context(options)

    @property
    def options(self):
        return self._context.options

    def __call__(self, tokens, /):
        return parse(tokens, self._context)

    def __repr__(self):
        return f"parser({self._context.options!r})"


def create_parser(options=Unset, /, **kwargs):
    """
    Build a Parser from ParserOptions, or from the ParserOptions keyword arguments.

        create_parser(ParserOptions(arguments={...}))
        create_parser(arguments={...}, resolve_unknown="block")
    """
    if options is Unset:
        options = ParserOptions(**kwargs)
    elif kwargs:
        raise TypeError("create_parser() takes either parser options or keyword arguments, not both")
    return Parser(options)


__all__ = (
    "ParsedResult",
    "ParserState",
    "Parser",
    "create_parser",
    "create_initial_state",
    "is_flag",
    "extract_flag_name",
    "parse_flag",
    "parse_argument",
    "validate_required_parameters",
    "parse",
)
