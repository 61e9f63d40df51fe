"""
Parsed argument values: a small tagged variant typed once, at index-build time.

Overview
- Value: sealed base of four variants, each keeping the original text (raw) and the
  decoded Python object (payload):
  • Integer  → int
  • Float    → float
  • Boolean  → bool
  • String   → str
- kind: the variant's type name ("Integer", "Float", "Boolean", "String"), used as
  the 'found' side of type-mismatch errors.
- parse(text): classify a raw string, trying float, then int, then the boolean
  literals, and falling back to String.

Classification notes
- Float requires a decimal point or an exponent ("1.5", ".5", "2.", "1e3"); a bare
  integer literal is never a Float. "inf"/"nan" stay strings.
- Boolean literals are exactly "true", "True", "false", "False".
"""
import re

_FLOAT = re.compile(r"[+-]?(\d+\.\d*|\.\d+|\d+(?=[eE]))([eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")
_BOOLEANS = {"true": True, "True": True, "false": False, "False": False}


class Value:
    """
    one parsed scalar: the raw token plus its typed payload.

    variants compare equal when they are the same variant with equal payloads, so
    Integer("5") == Integer("+5") but Integer("1") != Float("1.0").
    """
    __slots__ = ("raw", "payload")

    def __init__(self, raw, /):
        if not isinstance(raw, str):
            raise TypeError("%s() argument must be a string" % type(self).__name__)
        self.raw = raw
        self.payload = self._convert(raw)

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if cls.__base__ is not Value:
            raise TypeError(f"type {cls.__base__.__name__!r} is not an acceptable base type")

    @staticmethod
    def _convert(raw):
        raise NotImplementedError

    @property
    def kind(self):
        return type(self).__name__

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return type(self) is type(other) and self.payload == other.payload

    def __hash__(self):
        return hash((type(self), self.payload))

    def __repr__(self):
        return "%s(%r)" % (self.kind, self.raw)

    def __rich_repr__(self):
        yield self.raw


class Integer(Value):
    __slots__ = ()
    _convert = staticmethod(int)


class Float(Value):
    __slots__ = ()
    _convert = staticmethod(float)


class Boolean(Value):
    __slots__ = ()

    @staticmethod
    def _convert(raw):
        try:
            return _BOOLEANS[raw]
        except KeyError:
            raise ValueError("invalid boolean literal: %r" % raw) from None


class String(Value):
    __slots__ = ()
    _convert = staticmethod(str)


def parse(text, /):
    """
    classify a raw argument string into its Value variant.

    order: float → int → boolean literal → string.
    """
    if not isinstance(text, str):
        raise TypeError("parse() argument must be a string")
    if _FLOAT.fullmatch(text):
        return Float(text)
    if _INTEGER.fullmatch(text):
        return Integer(text)
    if text in _BOOLEANS:
        return Boolean(text)
    return String(text)


__all__ = (
    "Value",
    "Integer",
    "Float",
    "Boolean",
    "String",
    "parse",
)
