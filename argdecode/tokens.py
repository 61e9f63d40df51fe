r"""
Argdecode tokenizer: turn a raw argument list into unambiguous name/value pairs.

Overview
- Classification
  • isname(token): a token is a name iff it starts with one or two dashes followed by a
    Unicode letter (r"--?[^\W\d_]"). Everything else is a value, including "-5", "-",
    "---x" and the empty string.

- Flat-stream helpers (list[str] -> list[str])
  • split_equals(tokens): split every name token at its first '=' ("--a=b=c" → "--a", "b=c").
  • add_bools(tokens): insert "true" after a name that is followed by another name or
    that ends the stream ("--foo -b" → "--foo true -b true").

- Clustering
  • unclusters(token): decompose a single-dash token letter by letter, left to right.
    The first non-letter stops the cluster and the remainder becomes the value of the
    last letter ("-abc" → a, b, c set to "true"; "-ea8" → e="true", a="8"; "-ab=5" → a="true", b="5").
    A cluster made only of letters never takes the following token as a value.

- normalize(arguments, strict=False)
  • Single left-to-right pass producing Normalized(pairs, positionals).
  • "--" ends name/value processing: every remaining argument is positional, verbatim.
  • A name takes its inline value, or the next argument when that argument is a value
    (and not "--"); otherwise a synthetic "true" is paired with it.
  • A value nobody consumed is positional (or, in strict mode, a dangling-value fault).

Quick example
    >>> normalize(["--name=Lucy", "-ea8", "math", "--", "-x"])
    Normalized(pairs=(('--name', 'Lucy'), ('-e', 'true'), ('-a', '8')), positionals=('math', '-x'))
"""
import re
from collections import namedtuple

from .faults import DanglingValueError, DecodeErrors, EmptyValueWarning, FaultCode, getdoc, trigger
from .utils import ordinal

_NAME = re.compile(r"--?[^\W\d_]")
_LETTER = re.compile(r"[^\W\d_]")

SEPARATOR = "--"
TRUE = "true"


def isname(token, /):
    """
    return True when the token is an option name ("-x", "--xyz"), False for values.
    """
    if not isinstance(token, str):
        raise TypeError("isname() argument must be a string")
    return _NAME.match(token) is not None


def split_equals(tokens, /):
    """
    split name tokens at the first '=' only; value tokens pass through untouched.

    examples
    - ["--foo="]            → ["--foo", ""]
    - ["--foo=hello=world"] → ["--foo", "hello=world"]
    - ["a=b"]               → ["a=b"]  (not a name)
    """
    result = []
    for token in tokens:
        if isname(token) and "=" in token:
            name, _, value = token.partition("=")
            result += [name, value]
        else:
            result.append(token)
    return result


def add_bools(tokens, /):
    """
    insert a synthetic "true" after every name followed by another name or by nothing.

    examples
    - ["--foo"]                   → ["--foo", "true"]
    - ["--foo", "-b"]             → ["--foo", "true", "-b", "true"]
    - ["--foo", "hello", "--bar"] → ["--foo", "hello", "--bar", "true"]
    """
    tokens = list(tokens)
    result = []
    for position, token in enumerate(tokens):
        result.append(token)
        if isname(token) and (position + 1 == len(tokens) or isname(tokens[position + 1])):
            result.append(TRUE)
    return result


def unclusters(token, /):
    """
    decompose a short-option cluster into (name, value) pairs.

    rules
    - letters are read left to right after the single leading dash; each becomes a flag
      paired with "true".
    - the first non-letter ends the cluster: the rest of the token (minus one leading '=')
      is the value of the last letter read.

    examples
    - "-abc"  → [("-a", "true"), ("-b", "true"), ("-c", "true")]
    - "-a5"   → [("-a", "5")]
    - "-ea8"  → [("-e", "true"), ("-a", "8")]
    - "-ab=5" → [("-a", "true"), ("-b", "5")]
    """
    if not isname(token) or token.startswith(SEPARATOR):
        raise ValueError("unclusters() argument must be a short option token, got %r" % token)

    position = 1
    while position < len(token) and _LETTER.fullmatch(token[position]):
        position += 1

    pairs = [("-" + letter, TRUE) for letter in token[1:position]]
    if position < len(token):
        remainder = token[position:]
        pairs[-1] = (pairs[-1][0], remainder[1:] if remainder.startswith("=") else remainder)
    return pairs


class Normalized(namedtuple("Normalized", ("pairs", "positionals"))):
    """
    normalized token stream: (name, value) pairs plus positional arguments, both in input order.
    """
    __slots__ = ()

    @property
    def tokens(self):
        """
        the pairs flattened back into a [name, value, name, value, ...] stream.

        a value that would read as a name or as "--" stays inline ("--x=--y"), so
        normalizing the stream again yields the same pairs.
        """
        tokens = []
        for name, value in self.pairs:
            if value == SEPARATOR or isname(value):
                tokens.append("%s=%s" % (name, value))
            else:
                tokens += [name, value]
        return tokens


def normalize(arguments, /, *, strict=False, **options):
    """
    normalize a raw argument list into Normalized(pairs, positionals).

    parameters
    - arguments: Iterable[str], the argument vector without the program name.
    - strict: bool, when True a value that no name consumed (before "--") is a
      DanglingValueError instead of a positional argument. all dangling values are
      collected and surfaced together as DecodeErrors.
    - options: forwarded to trigger() (shell, fancy, colorful, ...).

    warnings
    - EmptyValueWarning when an inline value is empty ("--name="); the pair is kept
      with "" as its value.
    """
    if isinstance(arguments, str):
        raise TypeError("normalize() argument must be an iterable of strings, not a string")
    arguments = list(arguments)
    for argument in arguments:
        if not isinstance(argument, str):
            raise TypeError("normalize() argument must be an iterable of strings")

    pairs = []
    positionals = []
    faults = []

    position = 0
    while position < len(arguments):
        token = arguments[position]
        position += 1

        if token == SEPARATOR:
            positionals.extend(arguments[position:])
            break

        if not isname(token):
            if strict:
                faults.append(DanglingValueError(
                    "Name",
                    "Value",
                    token=token,
                    position=ordinal(position),
                    docs=getdoc(FaultCode.DANGLING_VALUE),
                ))
            else:
                positionals.append(token)
            continue

        if token.find("=") == len(token) - 1:
            trigger(EmptyValueWarning(
                "empty inline value for %r at %s position" % (token[:-1], ordinal(position)),
                token=token,
                position=position,
                docs=getdoc(FaultCode.EMPTY_INLINE_VALUE),
            ), **options)

        if not token.startswith(SEPARATOR) and len(token) > 2:
            pairs.extend(unclusters(token))
            continue

        name, equals, value = token.partition("=")
        if equals:
            pairs.append((name, value))
        elif position < len(arguments) and arguments[position] != SEPARATOR and not isname(arguments[position]):
            pairs.append((name, arguments[position]))
            position += 1
        else:
            pairs.append((name, TRUE))

    if faults:
        trigger(DecodeErrors(faults), **options)

    return Normalized(tuple(pairs), tuple(positionals))


__all__ = (
    "SEPARATOR",
    "isname",
    "split_equals",
    "add_bools",
    "unclusters",
    "Normalized",
    "normalize",
)
