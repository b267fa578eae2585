"""
Vertin parser configuration.

ParserOptions bundles everything one parser needs: the declared positional
arguments and flags (in declaration order) plus the three behavior switches.

Switches
- resolve_alias: bool (default True)
  Register flag aliases in the lookup table. When False only canonical names
  are recognized and alias tokens are treated as unknown flags.
- resolve_flag_after_argument: bool (default True)
  When False, a flag token seen after any argument token is a structural error,
  whatever the unknown-token policy says.
- resolve_unknown: "ignore" | "include" | "block" (default "ignore")
  Policy for unknown flags and excess positional tokens: drop them, collect
  them into the unknown buckets of the result, or fail.

Invariants (checked on construction)
- names are non-empty strings without leading dashes;
- arguments map to Argument specs, flags map to Flag specs;
- no alias collides with a canonical flag name or with another flag's alias;
- at most one positional declares count="all" and it is the last one.
"""
from collections.abc import Mapping

from .arguments import Argument, Flag
from .utils import *

UNKNOWN_POLICIES = ("ignore", "include", "block")


def _sanitize_parameters(cls, kind, parameters, /):
    """
    Internal: validate a name → spec mapping and return a plain dict copy.
    """
    if not isinstance(parameters, Mapping):
        raise TypeError(f"{cls.__name__} {kind!r} must be a mapping of names to specs")
    spec = Argument if kind == "arguments" else Flag

    sanitized = {}
    for name, parameter in parameters.items():
        if not isinstance(name, str):
            raise TypeError(f"{cls.__name__} {kind} names must be strings")
        elif not name.strip():
            raise ValueError(f"{cls.__name__} {kind} names cannot be empty-strings")
        elif name.startswith("-"):
            raise ValueError(f"{cls.__name__} {kind} names are declared without leading dashes")
        if not isinstance(parameter, spec):
            raise TypeError(f"{cls.__name__} {kind} {name!r} must be {spec.__typename__} spec")
        sanitized[name] = parameter
    return sanitized


class ParserOptions:
    """
    Immutable parser configuration (see module docstring).

    Attributes (read-only)
    - arguments: Mapping[str, Argument] in declaration order.
    - flags: Mapping[str, Flag] in declaration order.
    - resolve_alias, resolve_flag_after_argument: bool.
    - resolve_unknown: "ignore" | "include" | "block".
    """
    __slots__ = (
        "_arguments",
        "_flags",
        "_resolve_alias",
        "_resolve_flag_after_argument",
        "_resolve_unknown",
    )

    arguments = mirror("arguments")
    flags = mirror("flags")
    resolve_alias = mirror("resolve_alias")
    resolve_flag_after_argument = mirror("resolve_flag_after_argument")
    resolve_unknown = mirror("resolve_unknown")

    def __init__(
            self,
            arguments=Unset,
            flags=Unset,
            *,
            resolve_alias=True,
            resolve_flag_after_argument=True,
            resolve_unknown="ignore",
    ):
        arguments = _sanitize_parameters(type(self), "arguments", coalesce(arguments, {}))
        flags = _sanitize_parameters(type(self), "flags", coalesce(flags, {}))

        if resolve_unknown not in UNKNOWN_POLICIES:
            raise ValueError(f"{type(self).__name__} 'resolve_unknown' must be one of 'ignore', 'include', or 'block'")

        # greedy positional: unique and last
        greedy = [name for name, argument in arguments.items() if argument.greedy]
        if len(greedy) > 1:
            raise ValueError(f"{type(self).__name__} only one argument can capture all remaining tokens, got {greedy!r}")
        if greedy and greedy[0] != list(arguments)[-1]:
            raise ValueError(f"{type(self).__name__} argument {greedy[0]!r} captures all remaining tokens and must be the last one")

        # aliases share one namespace with canonical names
        owners = dict.fromkeys(flags, None)
        for name, flag in flags.items():
            for alias in flag.alias:
                if alias in owners:
                    raise ValueError(f"{type(self).__name__} flag alias {alias!r} of {name!r} is already in use")
                owners[alias] = name

        object.__setattr__(self, "_arguments", arguments)
        object.__setattr__(self, "_flags", flags)
        object.__setattr__(self, "_resolve_alias", bool(resolve_alias))
        object.__setattr__(self, "_resolve_flag_after_argument", bool(resolve_flag_after_argument))
        object.__setattr__(self, "_resolve_unknown", resolve_unknown)

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __replace__(self, **overrides):
        """
        Return a copy with some fields replaced (used to apply app-level switches).
        """
        return type(self)(**{
            "arguments": self._arguments,
            "flags": self._flags,
            "resolve_alias": self._resolve_alias,
            "resolve_flag_after_argument": self._resolve_flag_after_argument,
            "resolve_unknown": self._resolve_unknown,
        } | overrides)

    def __rich_repr__(self):
        yield "arguments", dict(self._arguments)
        yield "flags", dict(self._flags)
        yield "resolve_alias", self._resolve_alias
        yield "resolve_flag_after_argument", self._resolve_flag_after_argument
        yield "resolve_unknown", self._resolve_unknown

    def __repr__(self):
        return f"parser-options({', '.join('%s=%r' % item for item in self.__rich_repr__())})"


__all__ = (
    "ParserOptions",
    "UNKNOWN_POLICIES",
)
