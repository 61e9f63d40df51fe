"""
Argument Index: fold a normalized token stream into a read-only keyed structure.

Layout
- key: the option name without its leading dash(es) ("--name" → "name", "-n" → "n").
  Long and short spellings stay distinct keys; aliasing is the decoders' business.
- entry:
  • a single Value when the key appeared once;
  • a Many (tuple of Values) when it appeared two or more times.
- POSITIONALS ("--"): reserved key holding the positional strings, verbatim and in
  input order. No option name can strip down to it.

Ordering
- Many is accumulated by prepending, so it is stored most-recent-first.
  ordered(entry) reverses it on read: callers always see first-to-last order.
"""
from types import MappingProxyType

from .tokens import SEPARATOR, Normalized
from .values import Value, parse

POSITIONALS = SEPARATOR


class Many(tuple):
    """
    repeated occurrences of one key, most recent first (see ordered()).
    """
    __slots__ = ()

    def __repr__(self):
        return "Many(%s)" % ", ".join(map(repr, self))


def ordered(entry, /):
    """
    return an index entry as a list in first-to-last occurrence order.

    a single Value is wrapped into a one-element list.
    """
    if isinstance(entry, Many):
        return list(reversed(entry))
    if isinstance(entry, Value):
        return [entry]
    raise TypeError("ordered() argument must be an index entry, not %s" % type(entry).__name__)


def keyof(name, /):
    """
    strip the leading dash(es) of an option name.
    """
    return name.removeprefix("-").removeprefix("-")


def build(normalized, /):
    """
    build the Argument Index of a normalized stream.

    returns a MappingProxyType: the index is immutable once built.
    """
    if not isinstance(normalized, Normalized):
        raise TypeError("build() argument must be a normalized token stream")

    index = {}
    for name, text in normalized.pairs:
        value = parse(text)
        match index.get(key := keyof(name)):
            case None:
                index[key] = value
            case Many() as entry:
                index[key] = Many((value, *entry))
            case entry:
                index[key] = Many((value, entry))

    index[POSITIONALS] = tuple(normalized.positionals)
    return MappingProxyType(index)


__all__ = (
    "POSITIONALS",
    "Many",
    "ordered",
    "keyof",
    "build",
)
