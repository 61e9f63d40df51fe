"""
Kinds: type decoders applied to one Argument Index entry.

A kind turns an entry (a single Value or a Many) into a Python object, or raises:
- TypeMismatchError when a value exists but is of the wrong variant;
- CardinalityError when a scalar kind receives repeated occurrences;
- DecodeErrors (from listof) bundling every failing element, each with a "*" path.

Paths raised here are relative ("*" for list elements, () for scalars); the field
decoder that owns the lookup prefixes them with its key.

Every kind also carries a `zero` factory: the placeholder the decoders hand to a
continuation when the field failed, so the remaining independent fields still run.

Builtin kinds
- string   ("String"):  any scalar, as its original text.
- integer  ("Integer"): Integer values only.
- floating ("Float"):   Float values, and Integer values widened to float.
- boolean  ("Boolean"): Boolean values only ("true"/"True"/"false"/"False").
- listof(kind) ("List"): a Many in first-to-last order, or a single Value wrapped
  as a one-element list.
"""
import copy
import types

from .faults import CardinalityError, DecodeError, DecodeErrors, FaultCode, TypeMismatchError, getdoc
from .index import Many, ordered
from .utils import rename
from .values import Boolean, Float, Integer


class Kind:
    __slots__ = ("name", "zero", "many", "_decode")

    def __init__(self, name, decode, /, zero, *, many=False):
        if not isinstance(name, str) or not name:
            raise TypeError("kind name must be a non-empty string")
        if not callable(decode) or not callable(zero):
            raise TypeError("kind decode and zero must be callables")
        self.name = name
        self.zero = zero
        self.many = many
        self._decode = decode

    def __call__(self, entry, /):
        return self._decode(entry)

    def __repr__(self):
        return "kind(%s)" % self.name


def scalar(name, project, /, zero):
    """
    build a scalar kind from a projection Value -> object.

    the projection raises TypeMismatchError for a wrong variant; repeated
    occurrences are rejected here, before projecting.
    """

    @rename(name.lower())
    def decode(entry):
        if isinstance(entry, Many):
            raise CardinalityError(name, docs=getdoc(FaultCode.CARDINALITY_MISMATCH))
        return project(entry)

    return Kind(name, decode, zero=zero)


def _mismatch(expected, value):
    return TypeMismatchError(expected, value.kind, docs=getdoc(FaultCode.TYPE_MISMATCH))


def _string(value):
    return value.raw


def _integer(value):
    if isinstance(value, Integer):
        return value.payload
    raise _mismatch("Integer", value)


def _floating(value):
    if isinstance(value, Float):
        return value.payload
    if isinstance(value, Integer):
        return float(value.payload)
    raise _mismatch("Float", value)


def _boolean(value):
    if isinstance(value, Boolean):
        return value.payload
    raise _mismatch("Boolean", value)


string = scalar("String", _string, zero=str)
integer = scalar("Integer", _integer, zero=int)
floating = scalar("Float", _floating, zero=float)
boolean = scalar("Boolean", _boolean, zero=bool)


def listof(kind, /):
    """
    list kind decoding every occurrence with `kind`, first occurrence first.

    a key given once is wrapped as a one-element list; element failures are all
    reported, each with a "*" path segment.
    """
    kind = resolve(kind)

    @rename("listof")
    def decode(entry):
        result = []
        errors = []
        for value in ordered(entry):
            try:
                result.append(kind(value))
            except DecodeErrors as group:
                errors.extend(copy.replace(error, path=("*", *error.path)) for error in group.exceptions)
            except DecodeError as error:
                errors.append(copy.replace(error, path=("*", *error.path)))
        if errors:
            raise DecodeErrors(errors)
        return result

    return Kind("List", decode, zero=list, many=True)


def resolve(type, /):
    """
    map a kind or a Python type onto a kind.

    accepted
    - Kind instances (returned unchanged)
    - str, int, float, bool
    - list (list of strings) and list[T] for any accepted T
    """
    if isinstance(type, Kind):
        return type
    if isinstance(type, types.GenericAlias) and type.__origin__ is list:
        argument, = type.__args__
        return listof(argument)
    try:
        return {
            str: string,
            int: integer,
            float: floating,
            bool: boolean,
        }[type]
    except (KeyError, TypeError):
        pass
    if type is list:
        return listof(string)
    raise TypeError("cannot decode arguments as %r" % (type,))


__all__ = (
    "Kind",
    "scalar",
    "string",
    "integer",
    "floating",
    "boolean",
    "listof",
    "resolve",
)
