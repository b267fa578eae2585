"""
Vertin parser context: precomputed, read-only lookup tables.

A ParserContext is built once per ParserOptions and shared by every parse call
made with it, so per-token work is a dict lookup instead of a scan of the specs.

Tables
- flag_lookup: canonical name and every alias → canonical name. Aliases are
  only registered when options.resolve_alias is True.
- flag_defaults: canonical name → default, for non-required flags only. A flag
  declared without a default gets the None placeholder, which still marks it
  as known-optional (as opposed to required).
- argument_defaults: same rule for positional arguments.
"""
import logging
from types import MappingProxyType

from .options import ParserOptions
from .utils import *

logger = logging.getLogger(__name__)


class ParserContext:
    """
    Immutable bundle of the options and the derived lookup tables.
    """
    __slots__ = ("_options", "_flag_lookup", "_flag_defaults", "_argument_defaults")

    options = mirror("options")
    flag_lookup = mirror("flag_lookup")
    flag_defaults = mirror("flag_defaults")
    argument_defaults = mirror("argument_defaults")

    def __init__(self, options, flag_lookup, flag_defaults, argument_defaults, /):
        object.__setattr__(self, "_options", options)
        object.__setattr__(self, "_flag_lookup", MappingProxyType(dict(flag_lookup)))
        object.__setattr__(self, "_flag_defaults", MappingProxyType(dict(flag_defaults)))
        object.__setattr__(self, "_argument_defaults", MappingProxyType(dict(argument_defaults)))

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __rich_repr__(self):
        yield "flag_lookup", dict(self._flag_lookup)
        yield "flag_defaults", dict(self._flag_defaults)
        yield "argument_defaults", dict(self._argument_defaults)

    def __repr__(self):
        return f"parser-context({', '.join('%s=%r' % item for item in self.__rich_repr__())})"


def create_parser_context(options, /):
    """
    Build the lookup tables for a parser configuration (pure, no I/O).
    """
    if not isinstance(options, ParserOptions):
        raise TypeError("create_parser_context() argument must be parser options")

    flag_lookup = {}
    flag_defaults = {}
    argument_defaults = {}

    for name, flag in options.flags.items():
        flag_lookup[name] = name
        if options.resolve_alias:
            for alias in flag.alias:
                flag_lookup[alias] = name
        if not flag.required:
            flag_defaults[name] = coalesce(flag.default)

    for name, argument in options.arguments.items():
        if not argument.required:
            argument_defaults[name] = coalesce(argument.default)

    logger.debug("parser context built: %d flag names, %d flag defaults, %d argument defaults",
                 len(flag_lookup), len(flag_defaults), len(argument_defaults))
    return ParserContext(options, flag_lookup, flag_defaults, argument_defaults)


__all__ = (
    "ParserContext",
    "create_parser_context",
)
