r"""
Argdecode decoders: build typed records out of an Argument Index.

Overview
- Decoder
  • An immutable wrapper around a function index -> (value, errors). Stateless and
    reusable across runs (and threads); nothing is cached on it.
  • decoder(index) runs it and raises DecodeErrors when anything failed.
  • decoder.then(continuation): continuation-passing composition. The continuation gets
    the decoded value and returns the decoder for "the rest of the record".
  • decoder.map(function): transform a successful value.

- Field primitives
  • field(*names, type=string, default=Unset): aliased lookup of one option.
  • flag(*names): boolean option, False when absent.
  • positionals(): the positional arguments, verbatim and in order; never fails.
  • success(value) / decoded(value): terminal decoder ignoring the index.

- Combinators
  • with_default(decoder, default): substitute the default on missing input only.
  • optional(decoder): with_default(decoder, None).
  • one_of(*decoders): first decoder without errors wins.
  • @record: applicative record decoder from a callable whose parameter defaults are
    decoders (the same signature-driven style as a command declaration).

- decode(decoder, prompt=Unset, strict=False, **options)
  • normalize → build index → run decoder; returns the value or triggers DecodeErrors.

Error accumulation
- Independent fields never hide each other's errors. A failed field still hands its
  kind's zero value to the continuation, so every later field is decoded and reported;
  the final value of a failed run is discarded.
- Errors keep the order in which fields were requested.

Aliasing policy
- Names are looked up in declaration order; error paths always use the first name
  without its dashes (field("--name", "-n") reports ("name",)).
- Several names present: a list kind concatenates their occurrences in declaration
  order (all "--files" values, then all "-f" values); a scalar kind is a cardinality
  error, exactly as when one name is repeated.

Quick example
    >>> @record
    ... def person(name=field("--name", "-n"), age=field("--age", "-a", type=int), *, loud=flag("--loud", "-l")):
    ...     return name, age, loud
    >>> decode(person, ["--name=Lucy", "-a", "8", "-l"])
    ('Lucy', 8, True)
"""
import copy
import inspect
import re
import shlex
import sys
from collections.abc import Iterable
from inspect import Parameter

from .faults import CardinalityError, DecodeError, DecodeErrors, FaultCode, MissingFieldError, getdoc, trigger
from .index import POSITIONALS, Many, build, keyof, ordered
from .kinds import boolean, resolve, string
from .tokens import normalize
from .utils import Unset, coalesce, rename


class Decoder:
    """
    a composable, reusable decoding step over an Argument Index.

    run(index) returns (value, errors) where errors is a tuple of DecodeError in the
    order the fields were requested; value is a placeholder whenever errors is non-empty.
    """
    __slots__ = ("_run", "_label")

    def __init__(self, run, /, label=Unset):
        if not callable(run):
            raise TypeError("Decoder() argument must be callable")
        self._run = run
        self._label = label

    def run(self, index, /):
        value, errors = self._run(index)
        return value, tuple(errors)

    def __call__(self, index, /):
        value, errors = self.run(index)
        if errors:
            raise DecodeErrors(errors)
        return value

    def then(self, continuation, /):
        """
        chain "the rest of the decoding" after this decoder.

        the continuation receives this decoder's value (or its zero placeholder when
        it failed) and must return a Decoder; both error lists are concatenated.

        the placeholder is a kind's zero ("", 0, 0.0, False, []), so a continuation must
        not compute with its argument: build decoders in it and do the arithmetic in a
        final map() or in a @record callback, which only run on success.
            field("--n", type=int).then(lambda n: success(10 / n))  # ZeroDivisionError when --n is missing
            field("--n", type=int).map(lambda n: 10 / n)  # reports the missing field
        """
        if not callable(continuation):
            raise TypeError("then() argument must be callable")

        @rename("then")
        def run(index):
            value, errors = self.run(index)
            following = continuation(value)
            if not isinstance(following, Decoder):
                raise TypeError("then() continuation must return a decoder, not %s" % type(following).__name__)
            result, others = following.run(index)
            return result, errors + others

        return Decoder(run, label="%r.then(%s)" % (self, getattr(continuation, "__name__", "...")))

    def map(self, function, /):
        """
        apply `function` to a successful value; failures pass through untouched.
        """
        if not callable(function):
            raise TypeError("map() argument must be callable")

        @rename("map")
        def run(index):
            value, errors = self.run(index)
            if errors:
                return value, errors
            return function(value), ()

        return Decoder(run, label="%r.map(%s)" % (self, getattr(function, "__name__", "...")))

    def __repr__(self):
        return coalesce(self._label, "decoder(%s)" % self._run.__name__)

    def __rich_repr__(self):
        yield repr(self)


def _sanitize_names(typename, names, /):
    r"""
    validate option spellings and return (names, keys).

    rules
    - at least one name; each a non-empty string matching r"--?[^\W\d_]([-_]?[^\W_]+)*"
      (unicode letters allowed; inner dashes and underscores separate words, "--dry_run").
    - no two names may strip down to the same key ("--n" and "-n" collide).
    """
    if not names:
        raise TypeError(f"{typename}() must specify at least one name")

    sanitized = []
    keys = []
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{typename}() names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{typename}() names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_]([-_]?[^\W_]+)*", name):
            raise ValueError(f"{typename}() names must be valid shell-style option names, got {name!r}")
        elif (key := keyof(name)) in keys:
            raise ValueError(f"{typename}() names cannot contain duplicates")
        sanitized.append(name)
        keys.append(key)

    return tuple(sanitized), tuple(keys)


def field(*names, type=string, default=Unset):
    """
    decode one option, looked up under any of its names.

    parameters
    - names: one or more spellings ("--name", "-n"); the first one names the error path.
    - type: a kind (string, integer, floating, boolean, listof(...)) or a Python type
      (str, int, float, bool, list[...]).
    - default: when given, substituted if the option is absent (never when malformed).

    faults
    - MissingFieldError(kind, "Nothing", (key,)) when no name is present.
    - CardinalityError(kind, "List", (key,)) when a scalar option is repeated.
    - TypeMismatchError / element errors from the kind, prefixed with (key,).
    """
    names, keys = _sanitize_names("field", names)
    kind = resolve(type)
    primary = keys[0]

    @rename("field")
    def run(index):
        entries = [index[key] for key in keys if key in index]

        if not entries:
            return kind.zero(), (MissingFieldError(kind.name, path=(primary,), docs=getdoc(FaultCode.MISSING_FIELD)),)

        if len(entries) == 1:
            entry, = entries
        elif kind.many:
            entry = Many(reversed([value for entry in entries for value in ordered(entry)]))
        else:
            return kind.zero(), (CardinalityError(kind.name, path=(primary,), docs=getdoc(FaultCode.CARDINALITY_MISMATCH)),)

        try:
            return kind(entry), ()
        except DecodeErrors as group:
            errors = group.exceptions
        except DecodeError as error:
            errors = (error,)
        return kind.zero(), tuple(copy.replace(error, path=(primary, *error.path)) for error in errors)

    decoder = Decoder(run, label="field(%s, type=%r)" % (", ".join(map(repr, names)), kind))
    return decoder if default is Unset else with_default(decoder, default)


def flag(*names):
    """
    boolean option: False when absent, True for a bare flag or "true"/"True",
    False for "false"/"False"; any other value is a type mismatch.
    """
    names, _ = _sanitize_names("flag", names)
    return with_default(field(*names, type=boolean), False)


def with_default(decoder, default, /):
    """
    substitute `default` when the decoder only failed because its input is missing.

    malformed input (type or cardinality errors) is reported, never masked. every run
    gets a shallow copy of `default`, so a mutable default ([] or {}) is never shared.
    """
    if not isinstance(decoder, Decoder):
        raise TypeError("with_default() first argument must be a decoder")

    @rename("with_default")
    def run(index):
        value, errors = decoder.run(index)
        if errors and all(isinstance(error, MissingFieldError) for error in errors):
            return copy.copy(default), ()
        return value, errors

    return Decoder(run, label="with_default(%r, %r)" % (decoder, default))


def optional(decoder, /):
    """
    None when the input is missing; see with_default().
    """
    return with_default(decoder, None)


def positionals():
    """
    the positional arguments as a list of strings, in input order.
    """

    @rename("positionals")
    def run(index):
        return list(index.get(POSITIONALS, ())), ()

    return Decoder(run, label="positionals()")


def success(value, /):
    """
    terminal decoder: ignore the index and yield `value`.
    """

    @rename("success")
    def run(index):
        return value, ()

    return Decoder(run, label="success(%r)" % (value,))


decoded = success


def one_of(*decoders):
    """
    try decoders in order; the first one without errors wins.

    when all of them fail, the first decoder's outcome is reported.
    """
    if not decoders:
        raise TypeError("one_of() requires at least one decoder")
    for decoder in decoders:
        if not isinstance(decoder, Decoder):
            raise TypeError("one_of() arguments must be decoders")

    @rename("one_of")
    def run(index):
        outcome = Unset
        for decoder in decoders:
            value, errors = decoder.run(index)
            if not errors:
                return value, ()
            outcome = outcome or (value, errors)
        return outcome

    return Decoder(run, label="one_of(%s)" % ", ".join(map(repr, decoders)))


def record(callback=Unset, /):
    """
    build an applicative record decoder from a callable's parameter defaults.

    every parameter must default to a Decoder; they all run against the same index in
    parameter order and every error is collected. on success the callable is invoked
    with the decoded values (positional parameters positionally, keyword-only ones by
    name) and its result is the record.

    usage
        @record
        def options(path=field("--path", "-p"), *, verbose=flag("--verbose", "-v")):
            return Options(path, verbose)

    classes work too, as long as their constructor parameters default to decoders.
    """

    @rename("record")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@record must be applied to a callable")

        parameters = []
        for name, parameter in inspect.signature(callback).parameters.items():
            if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
                raise TypeError("@record parameter %r cannot be variadic" % name)
            if not isinstance(parameter.default, Decoder):
                raise TypeError("@record parameter %r must default to a decoder" % name)
            parameters.append(parameter)

        @rename(getattr(callback, "__name__", "record"))
        def run(index):
            args = []
            kwargs = {}
            errors = []
            for parameter in parameters:
                value, failures = parameter.default.run(index)
                errors.extend(failures)
                if parameter.kind is Parameter.KEYWORD_ONLY:
                    kwargs[parameter.name] = value
                else:
                    args.append(value)
            if errors:
                return None, errors
            return callback(*args, **kwargs), ()

        return Decoder(run, label="record(%s)" % run.__name__)

    return wrapper(callback) if callback is not Unset else wrapper


def decode(decoder, prompt=Unset, /, *, strict=False, **options):
    """
    decode a prompt into a value with `decoder`.

    parameters
    - prompt:
      • Unset: read arguments from sys.argv[1:].
      • str: shell-like string; split via shlex.split.
      • Iterable[str]: pre-tokenized arguments, used verbatim.
    - strict: report values bound to nothing (before "--") as dangling-value faults.
    - options: forwarded to trigger(): shell (print and exit instead of raising),
      fancy, colorful, prog.

    returns
    - the decoded value.

    raises
    - DecodeErrors with every fault (in non-shell mode).
    - TypeError when the decoder or the prompt has the wrong type.
    """
    if not isinstance(decoder, Decoder):
        raise TypeError("decode() first argument must be a decoder")

    if prompt is Unset:
        arguments = sys.argv[1:]
    elif isinstance(prompt, str):
        arguments = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        arguments = list(prompt)
    else:
        raise TypeError("decode() second argument must be a string or an iterable of strings")

    index = build(normalize(arguments, strict=strict, **options))
    value, errors = decoder.run(index)
    if errors:
        trigger(DecodeErrors(errors), **options)
    return value


__all__ = (
    "Decoder",
    "field",
    "flag",
    "with_default",
    "optional",
    "positionals",
    "success",
    "decoded",
    "one_of",
    "record",
    "decode",
)
