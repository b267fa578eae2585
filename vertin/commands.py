"""
Vertin command layer: declare commands and compose them into a tree.

What this module provides
- Command: binds a handler to its identity (display name, description,
  version), its executable name (the token that selects it), its parameter
  specs (positional arguments and flags) and its subcommands.
- Factories:
  • command(...): create a Command or a decorator that produces one.
  • rootcommand(...): the fallback command that runs when no command name
    matches; it never takes part in matching and cannot have subcommands.
- Validators: validate_commands(...) and validate_root_command(...), run by
  the runtime before any token is read.

Core ideas
- Parent owns children: subcommands live in an ordered tuple and carry no
  back-pointer, so a tree can be shared and walked without cycles.
- The parser configuration (ParserOptions) is built when the command is, so
  a bad spec fails at declaration time instead of at the first invocation.

Quick start
    from vertin import command, Argument, Flag, Number

    @command(arguments={"files": Argument(str, count="all")},
             flags={"port": Flag(Number, alias="p", default=8080)})
    def serve(context):
        # serve the given files
        ...

    @serve.command(exec_name="ls")
    def listing(context):
        # list what would be served
        ...
"""
import functools
import inspect
import operator
import re
from collections.abc import Iterable, Mapping

from .options import ParserOptions
from .utils import *

ROOT = "__root__"
ROOT_DESCR = "__root_description__"


class CommandType(type):
    """
    Metaclass that turns Command into an introspectable, read-only record.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all names
      listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            - command(name='build', exec_name='build', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_strings(cls, metadata):
    """
    Normalize the scalar string metadata fields (name, descr, version, exec_name).

    - Validates type: str | Unset.
    - Trims strings; empty strings are rejected.
    - Unset resolves to None.
    """
    for name in ("name", "descr", "version", "exec_name"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)

    if metadata["name"] is None:
        raise TypeError(f"{cls.__typename__} 'name' is required when the handler has no __name__")
    if metadata["exec_name"] is None:
        metadata["exec_name"] = metadata["name"]
    elif metadata["exec_name"].startswith("-"):
        raise ValueError(f"{cls.__typename__} 'exec_name' cannot start with a dash")


def _process_children(cls, metadata):
    """
    Normalize subcommands into a list, rejecting duplicate exec names.
    """
    if not isinstance(children := metadata["children"], Iterable):
        raise TypeError(f"{cls.__typename__} 'children' must be an iterable of commands")
    metadata["children"] = []
    for child in children:
        if not isinstance(child, Command):
            raise TypeError(f"{cls.__typename__} 'children' must be an iterable of commands")
        _attach(cls, metadata["children"], child)


def _attach(cls, children, child, /):
    """
    Append child to a sibling list unless its exec name is already in use.
    """
    if child.exec_name == ROOT:
        raise ValueError(f"{cls.__typename__} root command cannot be a subcommand")
    if any(sibling.exec_name == child.exec_name for sibling in children):
        raise ValueError(f"{cls.__typename__} exec name {child.exec_name!r} is already in use")
    children.append(child)


class Command(metaclass=CommandType):
    """
    A node of the command tree.

    Attributes (read-only)
    - name: display name; defaults to the handler's __name__.
    - descr: description; defaults to the handler's docstring.
    - version: optional version; the runtime falls back to the app version.
    - exec_name: the token that selects this command; defaults to name.
    - arguments / flags: Mapping[str, Argument] / Mapping[str, Flag].
    - options: the ParserOptions built from arguments and flags.
    - handler: the callable run with a vertin.runtime.Context.
    - children: tuple of subcommands in declaration order.
    - shell, fancy, colorful: fault rendering switches used by __invoke__.
    """
    __introspectable__ = (
        "name",
        "descr",
        "version",
        "exec_name",
        "arguments",
        "flags",
        "options",
        "handler",
        "children",
        "shell",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "name",
        "exec_name",
        "descr",
        "version",
        "arguments",
        "flags",
        "children",
    )

    def __new__(
            cls,
            handler,
            /,
            parent=Unset,
            name=Unset,
            descr=Unset,
            version=Unset,
            *,
            exec_name=Unset,
            arguments=Unset,
            flags=Unset,
            children=(),
            shell=Unset,
            fancy=Unset,
            colorful=Unset,
    ):
        """
        Construct a Command around a handler.

        Parameters
        - handler: Callable[[Context], Any]; may return a coroutine.
        - parent: Command | Unset
          When given, the new command is attached as the parent's last child.
        - name, descr, version, exec_name: str | Unset (see class docstring).
        - arguments, flags: Mapping of names to Argument / Flag specs.
        - children: Iterable[Command] of already-built subcommands.
        - shell, fancy, colorful: bool | Unset; inherited from parent when Unset.

        Raises
        - TypeError/ValueError on invalid metadata, invalid specs, or duplicate
          exec names among siblings.
        """
        if not callable(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must be callable")
        if not isinstance(parent, Command | Unset):
            raise TypeError(f"{cls.__typename__} 'parent' must be a command")
        if not isinstance(arguments, Mapping | Unset) or not isinstance(flags, Mapping | Unset):
            raise TypeError(f"{cls.__typename__} 'arguments' and 'flags' must be mappings")

        options = ParserOptions(arguments, flags)
        metadata = {
            "name": coalesce(name, getattr(handler, "__name__", Unset)),
            "descr": coalesce(descr, inspect.getdoc(handler) or Unset),
            "version": version,
            "exec_name": exec_name,
            "arguments": options.arguments,
            "flags": options.flags,
            "options": options,
            "handler": handler,
            "children": children,
            "shell": bool(coalesce(shell, getattr(parent, "shell", False))),
            "fancy": bool(coalesce(fancy, getattr(parent, "fancy", False))),
            "colorful": bool(coalesce(colorful, getattr(parent, "colorful", False))),
        }
        _process_strings(cls, metadata)
        _process_children(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        if parent:
            if parent.exec_name == ROOT:
                raise ValueError(f"{cls.__typename__} root command cannot have subcommands")
            _attach(cls, parent._children, self)
        return self

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create a subcommand under this command (direct or decorator form).

            @app.command(exec_name="ls")
            def listing(context): ...
        """
        return command(source, self, *args, **kwargs)

    def __invoke__(self, prompt=Unset):
        """
        Run this command tree with a token stream, this command being the fallback.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Returns
        - whatever the selected handler returns.
        """
        # runtime depends on this module
        from .runtime import execute, tokenize

        tokens, start = tokenize(prompt)
        return execute(
            tokens,
            self.children,
            self,
            start,
            version=self.version,
            prog=self.name,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
        )


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct: cmd = command(handler, name="x", ...)
    - Decorator:
        @command(name="x", ...)
        def handler(context): ...

    Returns
    - Command | Callable[[Callable], Command]
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source) or isinstance(source, Command):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


def rootcommand(source=Unset, /, *, descr=Unset, arguments=Unset, flags=Unset, shell=Unset, fancy=Unset, colorful=Unset):
    """
    Create the root (fallback) command, directly or as a decorator.

    The root command is named "__root__" (display and exec name), has no
    version of its own and no subcommands. Its description defaults to the
    handler's docstring, or to the "__root_description__" placeholder when the
    handler has none.
    """
    @rename("rootcommand")
    def wrapper(source, /):
        if not callable(source) or isinstance(source, Command):
            raise TypeError("@rootcommand() must be applied to a callable")
        return Command(
            source,
            name=ROOT,
            descr=coalesce(descr, inspect.getdoc(source) or ROOT_DESCR),
            exec_name=ROOT,
            arguments=arguments,
            flags=flags,
            shell=shell,
            fancy=fancy,
            colorful=colorful,
        )

    return wrapper(source) if source is not Unset else wrapper


def _nonempty(object):
    return isinstance(object, str) and bool(object.strip())


def validate_commands(commands, /):
    """
    Validate a command forest before it is used for matching.

    Checks (recursively, siblings first)
    - every item is a Command;
    - no two siblings share an exec name;
    - every command has a non-empty name and description and a callable handler.

    Raises
    - TypeError: when an item is not a Command or a handler is not callable.
    - ValueError: on duplicates or missing metadata.
    """
    if not isinstance(commands, Iterable):
        raise TypeError("validate_commands() argument must be an iterable of commands")
    seen = set()
    for command in commands:
        if not isinstance(command, Command):
            raise TypeError("validate_commands() argument must be an iterable of commands")
        if command.exec_name in seen:
            raise ValueError(f"duplicate exec name {command.exec_name!r} found in commands at the same level")
        seen.add(command.exec_name)
        if not _nonempty(command.name):
            raise ValueError(f"command {command.exec_name!r} must have a non-empty name")
        if not _nonempty(command.descr):
            raise ValueError(f"command {command.exec_name!r} must have a non-empty description")
        if not callable(command.handler):
            raise TypeError(f"command {command.exec_name!r} must have a callable handler")
        validate_commands(command.children)


def validate_root_command(root, /):
    """
    Validate the root command: description, handler, and no subcommands.
    """
    if not isinstance(root, Command):
        raise TypeError("validate_root_command() argument must be a command")
    if not _nonempty(root.descr):
        raise ValueError("root command must have a non-empty description")
    if not callable(root.handler):
        raise TypeError("root command must have a callable handler")
    if root.children:
        raise ValueError("root command cannot have subcommands")


__all__ = (
    # Classes
    "Command",

    # Factories
    "command",
    "rootcommand",

    # Validators
    "validate_commands",
    "validate_root_command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
