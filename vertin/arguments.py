r"""
Vertin parameter specifications.

Overview
- Specs
  • Argument[_T]: positional parameter, consulted strictly in declaration order.
    Supports a multiplicity ('count'): a positive integer (default 1) or "all",
    which captures every remaining token.
  • Flag[_T]: named parameter identified by a leading-dash token, with optional
    aliases. A flag resolved by Boolean is presence-only; any other flag takes the
    next token as its value.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- Shared
  • resolver: anything accepted by resolvers.resolver() (Resolver, type, callable,
    list/tuple chain). Normalized to a Resolver.
  • required: bool. A required parameter has no default and is validated once
    all tokens were consumed.
  • default: any value (including None). Forbidden together with required.
- Argument only
  • count: Unset | int (>= 1) | "all". Unset means a single value.
- Flag only
  • alias: Unset | str | Iterable[str]. Names are given without dashes, must be
    non-empty and unique, and cannot repeat the canonical name (checked by the
    parser options, which know the canonical name).

Quick example:
    >>> from vertin.arguments import Argument, Flag
    >>> from vertin.resolvers import Boolean, Number
    >>> files = Argument(str, count="all")
    >>> port = Flag(Number, alias="p", default=8080)
    >>> verbose = Flag(Boolean, alias=("v", "V"))

Public API
- Classes: Argument, Flag
"""
import functools
import operator
import re
from collections.abc import Iterable

from .resolvers import Boolean, resolver as _resolver
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(resolver=Function(boolean), required=False, default=Unset, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by Argument and Flag.

    Responsibilities
    - resolver: normalized through resolvers.resolver(); TypeError when unusable.
    - required: coerced to bool; cannot be combined with an explicit default.
    Side effects
    - Mutates the provided metadata dict in place.
    """
    try:
        metadata["resolver"] = _resolver(metadata["resolver"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'resolver' must be a resolver, a type, a callable or a chain") from None

    if metadata["required"] and metadata["default"] is not Unset:
        raise TypeError(f"required {cls.__typename__} cannot have a 'default'")


def _sanitize_count(cls, metadata, /):
    """
    Internal: validate a positional multiplicity; Unset becomes 1.
    """
    count = metadata["count"]
    if isinstance(count, bool) or not isinstance(count, int | str | Unset):
        raise TypeError(f"{cls.__typename__} 'count' must be a positive integer or 'all'")
    if isinstance(count, str) and count != "all":
        raise ValueError(f"{cls.__typename__} 'count' must be a positive integer or 'all'")
    if isinstance(count, int) and count < 1:
        raise ValueError(f"{cls.__typename__} 'count' must be a positive integer")
    metadata["count"] = coalesce(count, 1)


def _sanitize_alias(cls, metadata, /):
    """
    Internal: normalize flag aliases into a tuple of unique, dash-less names.

    Accepted forms
    - Unset → ()
    - "v" → ("v",)
    - ("v", "V") / ["v", "V"] → ("v", "V")
    """
    alias = metadata["alias"]
    if alias is Unset:
        metadata["alias"] = ()
        return
    if isinstance(alias, str):
        alias = (alias,)
    elif not isinstance(alias, Iterable):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string or an iterable of strings")

    names = []
    for name in alias:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} aliases must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} aliases cannot be empty-strings")
        elif name.startswith("-"):
            raise ValueError(f"{cls.__typename__} aliases are declared without leading dashes")
        elif name in names:
            raise ValueError(f"{cls.__typename__} aliases cannot contain duplicates")
        names.append(name)
    metadata["alias"] = tuple(names)


class Argument[_T](metaclass=ArgumentType):
    """
    Positional parameter specification.

    Argument[_T] declares how a positional token (or run of tokens) is resolved.
    Positional specs are consulted strictly in declaration order; the name is
    the key it is declared under in the parser options.

    Arity
    - count=1 (default): one token, stored as a scalar.
    - count=N: up to N tokens, stored as a list (fewer when input runs out).
    - count="all": every remaining token, stored as a list. Only the last
      declared positional can use it.
    """

    __introspectable__ = (
        "resolver",
        "required",
        "default",
        "count",
    )

    def __new__(cls, resolver=str, /, *, required=False, default=Unset, count=Unset):
        metadata = {
            "resolver": resolver,
            "required": bool(required),
            "default": default,
            "count": count,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_count(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def greedy(self):
        """
        True when this positional captures every remaining token.
        """
        return self.count == "all"


class Flag[_T](metaclass=ArgumentType):
    """
    Named parameter specification.

    Flag[_T] declares how a flag token (e.g., -v, --verbose) is resolved.
    The canonical name is the key it is declared under in the parser options;
    aliases are extra names that resolve to the canonical one.

    Value handling
    - Boolean resolver: presence-only, the flag is set to True.
    - any other resolver: the next token is the value; a missing next token is a
      parse error.
    """

    __introspectable__ = (
        "resolver",
        "required",
        "default",
        "alias",
    )

    def __new__(cls, resolver=bool, /, *, required=False, default=Unset, alias=Unset):
        metadata = {
            "resolver": resolver,
            "required": bool(required),
            "default": default,
            "alias": alias,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_alias(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def boolean(self):
        """
        True when the flag is presence-only (resolved by Boolean).
        """
        return self.resolver is Boolean


__all__ = (
    # Classes (specifications)
    "Argument",
    "Flag",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
