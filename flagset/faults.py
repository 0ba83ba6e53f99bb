"""
Flagset faults (declaration and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every error the registry
  or the parser can raise. Codes are grouped by domain to keep messages
  consistent and make logs/searches predictable.
- FlagsetException: base type that carries message + options and knows how to
  render itself through rich in a lowercased, actionable way.
- DeclarationError / ParseError: the two families callers usually catch.
- trigger(): surface a fault either by raising it or by printing it on stderr.
- getdoc(): optional description lookup for a code from the host application.

Integration
- The registry and the parser raise faults directly; they never print and never
  exit. Whatever wraps them (a CLI entry point) decides what to do, typically by
  calling trigger(fault, shell=True) and rendering usage.
- Context travels in fault.options: every fault has title/code/hint; parse faults
  add token/index/descriptor/remaining so a usage message can point at the input.
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the registry and parser (stable identifiers).

    grouping (by high-level domain)
    - declaration (2110x)
      • MALFORMED_NAME, MISSING_NAME, MISSING_VALUE, UNSUPPORTED_TYPE,
        MISSING_DOCUMENTATION, DUPLICATE_SHORT_NAME, DUPLICATE_LONG_NAME,
        INVALID_SELECTION
    - group composition (2120x)
      • NOT_A_GROUP, MISSING_CHILD, UNNAMED_CHILD, DUPLICATE_CHILD, RECURSIVE_GROUP
    - value coercion (2130x)
      • UNCASTABLE_VALUE, INVALID_CHOICE
    - leftovers (2140x)
      • UNKNOWN_OPTIONS

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- declaration errors (21xxx) ---
    MALFORMED_NAME        = 21101
    MISSING_NAME          = 21102
    MISSING_VALUE         = 21103
    UNSUPPORTED_TYPE      = 21104
    MISSING_DOCUMENTATION = 21105
    DUPLICATE_SHORT_NAME  = 21106
    DUPLICATE_LONG_NAME   = 21107
    INVALID_SELECTION     = 21108

    # --- group composition errors (21xxx) ---
    NOT_A_GROUP           = 21201
    MISSING_CHILD         = 21202
    UNNAMED_CHILD         = 21203
    DUPLICATE_CHILD       = 21204
    RECURSIVE_GROUP       = 21205

    # --- parse errors (21xxx) ---
    UNCASTABLE_VALUE      = 21301
    INVALID_CHOICE        = 21302

    # --- unknown options (21xxx) ---
    UNKNOWN_OPTIONS       = 21401

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _progname():
    main = __import__("__main__")
    return getattr(main, "__prog__", os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "flagset")


class FlagsetException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def title(self):
        return self.options.get("title", "")

    @property
    def hint(self):
        return self.options.get("hint", "")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
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

        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"

        header = Text.assemble(
            "[ ",
            text(_progname(), styler("prog-name")),
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeclarationError(FlagsetException): ...
class MalformedNameError(DeclarationError): ...
class MissingNameError(DeclarationError): ...
class MissingValueError(DeclarationError): ...
class UnsupportedTypeError(DeclarationError): ...
class MissingDocumentationError(DeclarationError): ...
class DuplicateShortNameError(DeclarationError): ...
class DuplicateLongNameError(DeclarationError): ...
class InvalidSelectionError(DeclarationError): ...
class NotAGroupError(DeclarationError): ...
class MissingChildError(DeclarationError): ...
class UnnamedChildError(DeclarationError): ...
class DuplicateChildError(DeclarationError): ...
class RecursiveGroupError(DeclarationError): ...


class ParseError(FlagsetException):
    @property
    def remaining(self):
        """unknown tokens collected before the parse stopped (order-preserving)."""
        return tuple(self.options.get("remaining", ()))


class UncastableValueError(ParseError): ...
class InvalidChoiceError(ParseError): ...
class UnknownOptionsError(ParseError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FlagsetException).
    - options are merged into the fault via copy.replace(fault, **options).
    - shell=True prints the fault on the stderr console (rich); otherwise it is raised.
    - the process is never terminated here; exiting is left to the caller.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "FlagsetException",
    "DeclarationError",
    "MalformedNameError",
    "MissingNameError",
    "MissingValueError",
    "UnsupportedTypeError",
    "MissingDocumentationError",
    "DuplicateShortNameError",
    "DuplicateLongNameError",
    "InvalidSelectionError",
    "NotAGroupError",
    "MissingChildError",
    "UnnamedChildError",
    "DuplicateChildError",
    "RecursiveGroupError",
    "ParseError",
    "UncastableValueError",
    "InvalidChoiceError",
    "UnknownOptionsError",
    "trigger",
    "getdoc",
)
