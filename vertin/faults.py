"""
Vertin faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing fault.
  Codes are grouped by domain to keep copy consistent and searches predictable.
- CommandException: base type that carries message + options and knows how to
  render itself with rich, in a friendly, lowercased and actionable way.
- ParseError and its subclasses: failures raised synchronously by the parser
  engine while consuming tokens (unknown tokens, missing values, missing
  required parameters, misplaced flags, rejected values).
- ConfigurationError / UnknownCommandError: matcher and runtime faults.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser and the matcher raise faults directly; they never render.
- The runtime catches CommandException and calls trigger(fault, **ctx): outside
  shell mode the fault is re-raised, in shell mode it is rendered on stderr via
  rich and the process exits with status 1.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - setup (1100x)
      • NO_COMMANDS
    - routing (1110x)
      • UNKNOWN_COMMAND
    - flags (1111x)
      • UNKNOWN_FLAG, MISSING_FLAG_VALUE, FLAG_AFTER_ARGUMENT
    - positionals (1112x)
      • UNEXPECTED_ARGUMENT
    - values (1113x)
      • MISSING_REQUIRED, INVALID_VALUE

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- setup errors (11xxx) ---
    NO_COMMANDS                 = 11001

    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- flag errors (11xxx) ---
    UNKNOWN_FLAG                = 11111
    MISSING_FLAG_VALUE          = 11112
    FLAG_AFTER_ARGUMENT         = 11113

    # --- positional errors (11xxx) ---
    UNEXPECTED_ARGUMENT         = 11121

    # --- value errors (11xxx) ---
    MISSING_REQUIRED            = 11131
    INVALID_VALUE               = 11132

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a message plus read-only rendering/context options.

    class-level defaults
    - __code__: FaultCode used when no 'code' option is given.
    - __title__: short title used when no 'title' option is given.

    recognized options
    - prog: program name shown in the header (overridden by __prog__ in __main__).
    - shell, fancy, colorful: rendering switches (see __trigger__/__rich__).
    - hint: one actionable sentence shown under the message.
    - any context the raiser wants to attach (token, name, index, ...).
    """
    __code__ = Unset
    __title__ = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "vertin")), styler("prog-name"))

        code = self.code
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))

        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class ConfigurationError(CommandException):
    __code__ = FaultCode.NO_COMMANDS
    __title__ = "no commands"


class UnknownCommandError(CommandException):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class ParseError(CommandException):
    __title__ = "parse error"


class UnknownFlagError(ParseError):
    __code__ = FaultCode.UNKNOWN_FLAG
    __title__ = "unknown flag"


class UnexpectedArgumentError(ParseError):
    __code__ = FaultCode.UNEXPECTED_ARGUMENT
    __title__ = "unexpected argument"


class MissingValueError(ParseError):
    __code__ = FaultCode.MISSING_FLAG_VALUE
    __title__ = "missing flag value"


class MissingRequiredError(ParseError):
    __code__ = FaultCode.MISSING_REQUIRED
    __title__ = "missing required parameter"


class FlagAfterArgumentError(ParseError):
    __code__ = FaultCode.FLAG_AFTER_ARGUMENT
    __title__ = "flag after arguments"


class InvalidValueError(ParseError):
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "ConfigurationError",
    "UnknownCommandError",
    "ParseError",
    "UnknownFlagError",
    "UnexpectedArgumentError",
    "MissingValueError",
    "MissingRequiredError",
    "FlagAfterArgumentError",
    "InvalidValueError",
    "trigger",
    "getdoc",
)
