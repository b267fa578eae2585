"""
Vertin resolvers: turn one raw token into a typed value.

Overview
- A resolver is a tagged variant; the parser dispatches on the tag, never on the
  shape of the wrapped callable:
  • Function(callable): plain transform, invoked as callable(value).
  • Constructor(type): type-constructing transform, invoked as type(value).
  • Chain(step, ...): ordered steps applied left-to-right; the first step consumes
    the raw string and each following step consumes the previous output.

- Built-ins
  • String: Constructor(str).
  • Number: integer text becomes int, any other numeric text becomes float.
  • Boolean: the presence marker for flags. Used as a value resolver (for a
    positional argument or inside a chain) it accepts true/false, yes/no,
    on/off and 1/0, case-insensitive.

- resolver(x) normalizes plain Python objects into the variant so specs can be
  declared as Flag(int) or Argument([str.strip, Path]) without wrapping by hand.

Malformed text
- Number and Boolean raise ValueError on text they do not understand. The parser
  turns ValueError/TypeError raised by any resolver into an InvalidValueError that
  names the offending token.
"""
import functools
import math

from .utils import rename


class Resolver:
    """
    Base of the resolver variant.

    Subclasses set __kind__ ("function", "constructor" or "chain") and implement
    __call__(value). Instances are immutable and hashable by identity.
    """
    __kind__ = None
    __slots__ = ()

    @property
    def kind(self):
        return type(self).__kind__

    def __call__(self, value, /):
        raise NotImplementedError

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__.lower()} resolver is read-only")

    def __rich_repr__(self):
        yield self.target


class Function(Resolver):
    __kind__ = "function"
    __slots__ = ("target",)

    def __init__(self, target, /):
        if not callable(target):
            raise TypeError("function resolver target must be callable")
        if isinstance(target, type):
            raise TypeError("function resolver target cannot be a type, use Constructor(...)")
        object.__setattr__(self, "target", target)

    def __call__(self, value, /):
        return self.target(value)

    def __repr__(self):
        return f"Function({getattr(self.target, '__qualname__', self.target)!s})"


class Constructor(Resolver):
    __kind__ = "constructor"
    __slots__ = ("target",)

    def __init__(self, target, /):
        if not isinstance(target, type):
            raise TypeError("constructor resolver target must be a type")
        object.__setattr__(self, "target", target)

    def __call__(self, value, /):
        return self.target(value)

    def __repr__(self):
        return f"Constructor({self.target.__qualname__})"


class Chain(Resolver):
    __kind__ = "chain"
    __slots__ = ("steps",)

    def __init__(self, *steps):
        if not steps:
            raise ValueError("chain resolver must have at least one step")
        steps = tuple(map(resolver, steps))
        if any(step.kind == "chain" for step in steps):
            # Nested chains are flattened: the fold is associative.
            steps = tuple(nested for step in steps for nested in (step.steps if step.kind == "chain" else (step,)))
        object.__setattr__(self, "steps", steps)

    def __call__(self, value, /):
        return functools.reduce(lambda accumulated, step: step(accumulated), self.steps, value)

    def __repr__(self):
        return f"Chain({', '.join(map(repr, self.steps))})"

    def __rich_repr__(self):
        yield from self.steps


@rename("number")
def _number(value, /):
    """
    Parse numeric text: int when the text is an integer literal, float otherwise.
    """
    if not isinstance(value, str):
        raise TypeError("number resolver expects a string")
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"{value!r} is not a number") from None
    # "nan"/"inf" spellings are not accepted as user input
    if not math.isfinite(number):
        raise ValueError(f"{value!r} is not a finite number")
    return number


_TRUTHS = {"true": True, "yes": True, "on": True, "1": True,
           "false": False, "no": False, "off": False, "0": False}


@rename("boolean")
def _boolean(value, /):
    """
    Parse boolean text (true/false, yes/no, on/off, 1/0; case-insensitive).
    """
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        raise TypeError("boolean resolver expects a string")
    try:
        return _TRUTHS[value.strip().lower()]
    except KeyError:
        raise ValueError(f"{value!r} is not a boolean") from None


String = Constructor(str)
Number = Function(_number)
Boolean = Function(_boolean)


def resolver(object, /):
    """
    Normalize a plain Python object into a Resolver.

    rules (in order)
    - Resolver → returned as-is.
    - str → String; bool → Boolean.
    - any other type → Constructor(type).
    - list or tuple → Chain(*items) (items normalized recursively).
    - any other callable → Function(callable).

    Raises
    - TypeError: when the object cannot be used as a resolver.
    """
    if isinstance(object, Resolver):
        return object
    if object is str:
        return String
    if object is bool:
        return Boolean
    if isinstance(object, type):
        return Constructor(object)
    if isinstance(object, list | tuple):
        return Chain(*object)
    if callable(object):
        return Function(object)
    raise TypeError(f"{object!r} cannot be used as a resolver")


def resolve_value(value, resolver, /):
    """
    Resolve one raw token through a resolver (see module docstring).

    Dispatch
    - "chain": fold the token through each step, left-to-right.
    - "function": call the target with the value.
    - "constructor": construct the target from the value.
    """
    if not isinstance(resolver, Resolver):
        raise TypeError("resolve_value() second argument must be a resolver")
    match resolver.kind:
        case "chain":
            return functools.reduce(lambda accumulated, step: resolve_value(accumulated, step), resolver.steps, value)
        case "function":
            return resolver.target(value)
        case "constructor":
            return resolver.target(value)
        case _:
            raise TypeError(f"{resolver!r} is not a resolver")


__all__ = (
    "Resolver",
    "Function",
    "Constructor",
    "Chain",
    "String",
    "Number",
    "Boolean",
    "resolver",
    "resolve_value",
)
