"""
Argdecode faults (decode errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- DecodeError / DecodeWarning: base types carrying the structured payload
  (expected, found, path) plus free-form options, and knowing how to render
  themselves in a friendly, lowercased and actionable way.
- DecodeErrors: exception group bundling every error of one decode run, in the
  order the decoder requested the fields.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Structured payload
- expected: the type name the decoder wanted ("Integer", "Float", "Boolean", "String", "List", "Name").
- found: the type name that was there instead, or "Nothing" when the key is absent.
- path: tuple of argument keys (dashes stripped) leading to the failure; list
  elements are addressed with the "*" wildcard segment, e.g. ("files", "*").

Integration
- Decoders collect faults while running and the top-level decode() calls
  trigger(DecodeErrors(...), **options).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich
  on stderr and the process exits with status 1.
"""
import copy
import os.path
import sys
import warnings
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
    canonical fault codes used across the decoder (stable identifiers).

    grouping (by high-level domain)
    - fields (2110x)
      • MISSING_FIELD, TYPE_MISMATCH, CARDINALITY_MISMATCH
    - structure (2111x)
      • DANGLING_VALUE
    - warnings (2211x)
      • EMPTY_INLINE_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- field errors (21xxx) ---
    MISSING_FIELD               = 21101
    TYPE_MISMATCH               = 21102
    CARDINALITY_MISMATCH        = 21103

    # --- structural errors (21xxx) ---
    DANGLING_VALUE              = 21111

    # --- warnings (22xxx) ---
    EMPTY_INLINE_VALUE          = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    main = __import__("__main__")
    return getattr(main, "__prog__", options.get("prog") or os.path.basename(sys.argv[0]) or "argdecode")


def _renderer(options, defaults):
    """
    build the (styler, text) pair shared by every __rich__ implementation.

    styles are looked up in `defaults` overridden by __main__.__styles__; when the
    'colorful' option is off, every fragment is rendered as plain text.
    """
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))
    colorful = options.get("colorful", True)

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

    return styler, text


def render(path, /):
    """
    render an error path as a dotted key chain (e.g. 'files.*'); empty paths render as '<root>'.
    """
    return ".".join(map(str, path)) or "<root>"


class DecodeError(Exception):
    """
    one structured decode failure: (expected, found, path).

    subclasses only pin the fault code, title and hint; the payload shape is shared
    so callers can treat every error uniformly. equality compares the kind of
    fault and the payload, never the rendering options.
    """
    code = Unset
    title = "decode error"
    hint = "check the value given for this argument"

    def __init__(self, expected, found, /, path=(), **options):
        if not isinstance(expected, str) or not isinstance(found, str):
            raise TypeError("%s() expected and found must be strings" % type(self).__name__)
        self.expected = expected
        self.found = found
        self.path = tuple(path)
        self.options = MappingProxyType(options)
        super().__init__(expected, found, self.path)

    @property
    def message(self):
        message = "expected %s, found %s" % (self.expected.lower(), self.found.lower())
        if self.path:
            message += " at %r" % render(self.path)
        return message

    def __str__(self):
        return self.message

    def __repr__(self):
        return "%s(%r, %r, path=%r)" % (type(self).__name__, self.expected, self.found, self.path)

    def __eq__(self, other):
        if not isinstance(other, DecodeError):
            return NotImplemented
        return (type(self), self.expected, self.found, self.path) == (type(other), other.expected, other.found, other.path)

    def __hash__(self):
        return hash((type(self), self.expected, self.found, self.path))

    def __rich__(self):
        styler, text = _renderer(self.options, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs-marker": "#00E5FF dim",  # dim cyan marker
            "docs": "underline #00E5FF dim",  # host documentation line
        })

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " - ",
            text(self.code.normalize() if self.code else "-", styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        body = [
            text(self.message, styler("error-message")),
            Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint", self.hint), styler("hint"))),
        ]
        if docs := self.options.get("docs"):
            body.append(Text.assemble(text(" ⓘ ", styler("docs-marker")), text(docs, styler("docs"))))

        if self.options.get("fancy", False):
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(*body), title=header, title_align="left", width=width)

        return Group(header, *body)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        expected = overrides.pop("expected", self.expected)
        found = overrides.pop("found", self.found)
        path = overrides.pop("path", self.path)
        return type(self)(expected, found, path=path, **{**self.options, **overrides})


class MissingFieldError(DecodeError):
    code = FaultCode.MISSING_FIELD
    title = "missing field"
    hint = "provide this argument, e.g. --name value"

    def __init__(self, expected, found="Nothing", /, path=(), **options):
        super().__init__(expected, found, path=path, **options)


class TypeMismatchError(DecodeError):
    code = FaultCode.TYPE_MISMATCH
    title = "type mismatch"
    hint = "pass a value of the expected type"


class CardinalityError(DecodeError):
    code = FaultCode.CARDINALITY_MISMATCH
    title = "repeated argument"
    hint = "keep a single occurrence; this argument takes one value"

    def __init__(self, expected, found="List", /, path=(), **options):
        super().__init__(expected, found, path=path, **options)


class DanglingValueError(DecodeError):
    code = FaultCode.DANGLING_VALUE
    title = "dangling value"
    hint = "bind the value to an option or put positional values after '--'"

    @property
    def message(self):
        try:
            return "dangling value %r at %s position" % (self.options["token"], self.options["position"])
        except KeyError:
            return super().message


class DecodeWarning(Warning):
    """
    non-fatal notice raised while normalizing arguments.

    outside shell mode it is emitted through warnings.warn, so hosts can filter or
    escalate it with the usual warnings machinery.
    """
    code = Unset
    title = "decode warning"
    hint = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)
        super().__init__(message)

    def __rich__(self):
        styler, text = _renderer(self.options, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
            "docs-marker": "#FFB400 dim",  # dim amber marker
            "docs": "underline #FFB400 dim",  # host documentation line
        })

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " - ",
            text(self.code.normalize() if self.code else "-", styler("code")),
            " | ",
            text(self.title.title(), styler("warning-title")),
            " ]"
        )
        body = [
            text(self.message, styler("warning-message")),
            Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint", self.hint), styler("hint"))),
        ]
        if docs := self.options.get("docs"):
            body.append(Text.assemble(text(" ⓘ ", styler("docs-marker")), text(docs, styler("docs"))))

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")

        return Group(header, *body)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(DecodeWarning):
    code = FaultCode.EMPTY_INLINE_VALUE
    title = "empty inline value"
    hint = "add a value after '=' or drop the '=' to use the option as a flag"


class DecodeErrors(ExceptionGroup[DecodeError]):
    """
    every error of one decode run, in the order the fields were requested.

    `errors` exposes the plain (expected, found, path) triples for callers that
    do not care about exception types.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "decode failed", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("decode failed", tuple(exceptions))
        self.options = MappingProxyType(options)

    @property
    def errors(self):
        return [(error.expected, error.found, error.path) for error in self.exceptions]

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        styler, text = _renderer(self.options, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title
        })

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " - ",
            text("%s (%d)" % (self.message.title(), len(self.exceptions)), styler("title")),
            " ]"
        )

        renders = []
        for exception in self.exceptions:
            renders.append(copy.replace(exception, **{**self.options, "ratio": 2 / 3}))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted.

    typical options
    - shell, fancy, colorful, prog, hint, and any other context the renderer may
      want to show (e.g., token/position).
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
    "DecodeError",
    "MissingFieldError",
    "TypeMismatchError",
    "CardinalityError",
    "DanglingValueError",
    "DecodeWarning",
    "EmptyValueWarning",
    "DecodeErrors",
    "trigger",
    "getdoc",
    "render",
)
