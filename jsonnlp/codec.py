# License: BSD3

"""
Reading and writing JSON-NLP

You're likely most interested in `parse`, `read_file` and `render`.

Reading is lenient about what is missing and strict about what is
there: any field not found in the JSON takes its zero value (apart from
a handful of required ones, like the `id`, `text` and `lemma` of a
token), but a field holding the wrong sort of value is an error. Keys
we don't know about are skipped.

Writing leaves out empty strings, and only empty strings: zeros, False
and empty lists are always written.
"""

import io
import json
import logging
import math

from jsonnlp.schema import JsonNlp, Kind

_LOG = logging.getLogger(__name__)

_MAX_INTEGER = 2 ** 64 - 1
_MAX_SMALL_INTEGER = 2 ** 8 - 1


class JsonNlpException(Exception):
    """
    Anything that goes wrong while reading or writing JSON-NLP
    """
    def __init__(self, *args, **kw):
        super(JsonNlpException, self).__init__(*args, **kw)


class MalformedInput(JsonNlpException, ValueError):
    """
    The input is not JSON, or it is JSON but not JSON-NLP (missing
    required field, or a field with the wrong sort of value)
    """
    pass


class EncodingError(JsonNlpException, ValueError):
    """
    A model that can't be written as UTF-8 JSON (eg. a string with
    lone surrogates, or a NaN probability)
    """
    pass


# ---------------------------------------------------------------------
# reading
# ---------------------------------------------------------------------


def _subpath(path, key):
    "path to a key within an object (for error messages)"
    return key if not path else '%s.%s' % (path, key)


def _describe(value):
    "short description of the JSON type of a value"
    if value is None:
        return 'null'
    elif isinstance(value, bool):
        return 'boolean'
    elif isinstance(value, (int, float)):
        return 'number'
    elif isinstance(value, str):
        return 'string'
    elif isinstance(value, list):
        return 'array'
    else:
        return 'object'


def _mismatch(path, expected, value):
    "error for a field holding the wrong sort of value"
    return MalformedInput("%s: expected %s, got %s" %
                          (path or '<root>', expected, _describe(value)))


def _read_integer(value, limit, path):
    """
    An unsigned integer no bigger than `limit`.
    JSON booleans are not integers, nor are numbers like 1.5 or 1.0
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise _mismatch(path, 'an integer', value)
    if value < 0 or value > limit:
        raise MalformedInput("%s: %d is out of range (0 to %d)" %
                             (path, value, limit))
    return value


def _read_float(value, path):
    "A finite number, integers included"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _mismatch(path, 'a number', value)
    try:
        value = float(value)
    except OverflowError:
        raise MalformedInput("%s: number is too large" % path)
    if not math.isfinite(value):
        raise MalformedInput("%s: number is too large" % path)
    return value


def _read_list(value, path):
    "JSON array as a list of (item path, item) pairs"
    if not isinstance(value, list):
        raise _mismatch(path, 'an array', value)
    return [('%s[%d]' % (path, i), x) for i, x in enumerate(value)]


def _read_value(field, value, path):
    """
    Python value for a field given its JSON value
    """
    kind = field.kind
    if kind is Kind.string:
        if not isinstance(value, str):
            raise _mismatch(path, 'a string', value)
        try:
            value.encode('utf-8')
        except UnicodeEncodeError:
            raise MalformedInput("%s: string is not valid unicode "
                                 "(lone surrogate escape)" % path)
        return value
    elif kind is Kind.boolean:
        if not isinstance(value, bool):
            raise _mismatch(path, 'a boolean', value)
        return value
    elif kind is Kind.integer:
        return _read_integer(value, _MAX_INTEGER, path)
    elif kind is Kind.small_integer:
        return _read_integer(value, _MAX_SMALL_INTEGER, path)
    elif kind is Kind.float:
        return _read_float(value, path)
    elif kind is Kind.id_list:
        return tuple(_read_integer(x, _MAX_INTEGER, xpath)
                     for xpath, x in _read_list(value, path))
    elif kind is Kind.record:
        return read_record(field.record, value, path)
    elif kind is Kind.record_list:
        return tuple(read_record(field.record, x, xpath)
                     for xpath, x in _read_list(value, path))
    else:
        raise ValueError("Don't know how to read %s fields" % kind)


def read_record(cls, obj, path=''):
    """
    Build a record of the given class (see `jsonnlp.schema`) from a
    decoded JSON object.

    Fields missing from the object take their zero value, unless they
    are required.

    :param path: where the object sits in the overall document;
                 only used in error messages
    :raises MalformedInput:
    """
    if not isinstance(obj, dict):
        raise _mismatch(path, 'an object', obj)
    repeated = sorted(k for k in getattr(obj, 'repeated', ())
                      if k in cls.BY_WIRE)
    if repeated:
        raise MalformedInput("%s: duplicate field(s) %s" %
                             (path or '<root>', ", ".join(repeated)))
    values = {}
    for field in cls.FIELDS:
        fpath = _subpath(path, field.wire)
        if field.wire in obj:
            values[field.name] = _read_value(field, obj[field.wire], fpath)
        elif field.required:
            raise MalformedInput("%s: missing required field" % fpath)
    unknown = [k for k in obj if k not in cls.BY_WIRE]
    if unknown:
        _LOG.debug("%s: ignoring unknown field(s) %s",
                   path or '<root>', ", ".join(sorted(unknown)))
    return cls(**values)


def _reject_constant(name):
    "NaN and Infinity are not JSON, whatever the json module thinks"
    raise MalformedInput("%s is not a valid JSON value" % name)


class _JsonObject(dict):
    """
    A decoded JSON object which remembers the keys it saw more than
    once (the last value wins in the dict itself)
    """
    def __init__(self, pairs):
        super(_JsonObject, self).__init__(pairs)
        seen = set()
        self.repeated = set()
        for key, _ in pairs:
            if key in seen:
                self.repeated.add(key)
            seen.add(key)


def parse(text):
    """
    Read a JSON-NLP collection from a string (or UTF-8 bytes)

    :rtype: JsonNlp
    :raises MalformedInput: if the text is not JSON, or does not follow
                            the JSON-NLP schema
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as err:
            raise MalformedInput("input is not valid UTF-8: %s" % err)
    try:
        obj = json.loads(text,
                         parse_constant=_reject_constant,
                         object_pairs_hook=_JsonObject)
    except MalformedInput:
        raise
    except (ValueError, RecursionError) as err:
        # JSONDecodeError, over-long integer literals, too deep nesting
        raise MalformedInput("input is not valid JSON: %s" % err)
    return read_record(JsonNlp, obj)


def parse_from_source(source):
    """
    Read a JSON-NLP collection from an open stream (text or binary).

    The whole stream is read before anything is decoded, and the
    stream is closed when we are done with it, whatever happens.

    :raises MalformedInput: see `parse`
    :raises IOError: if reading fails
    """
    with source:
        try:
            text = source.read()
        except UnicodeDecodeError as err:
            raise MalformedInput("input is not valid UTF-8: %s" % err)
    return parse(text)


def read_file(path):
    """
    Read a JSON-NLP collection from the given path

    :rtype: JsonNlp
    """
    _LOG.debug("reading %s", path)
    return parse_from_source(open(path, 'rb'))


# ---------------------------------------------------------------------
# writing
# ---------------------------------------------------------------------


def _write_value(field, value):
    "JSON value for a field"
    kind = field.kind
    if kind is Kind.record:
        return write_record(value)
    elif kind is Kind.record_list:
        return [write_record(x) for x in value]
    elif kind is Kind.id_list:
        return list(value)
    elif kind is Kind.float:
        return float(value)
    else:
        return value


def write_record(record):
    """
    JSON object (as a dict, keys in field order) for a record.
    Empty string fields are left out
    """
    obj = {}
    for field, value in zip(record.FIELDS, record):
        if field.omit_when_empty and value == '':
            continue
        obj[field.wire] = _write_value(field, value)
    return obj


def render(doc, indent=None):
    """
    JSON text for a JSON-NLP collection (or any other record).

    The output is compact unless you ask for an `indent`. Keys come out
    in the same order every time.

    :rtype: string
    :raises EncodingError: if some string can't be written as UTF-8
                           or some number is not finite
    """
    separators = (',', ':') if indent is None else (',', ': ')
    try:
        text = json.dumps(write_record(doc),
                          ensure_ascii=False,
                          allow_nan=False,
                          indent=indent,
                          separators=separators)
    except ValueError as err:
        raise EncodingError("can't write as JSON: %s" % err)
    try:
        text.encode('utf-8')
    except UnicodeEncodeError as err:
        raise EncodingError("can't write as UTF-8: %s" % err)
    return text


def dump(doc, stream, indent=None):
    """
    Write a JSON-NLP collection to an open text stream
    """
    stream.write(render(doc, indent=indent))


def write_file(doc, path, indent=None):
    """
    Write a JSON-NLP collection to the given path (UTF-8).

    Nothing is written if the collection can't be rendered.
    """
    text = render(doc, indent=indent)
    _LOG.debug("writing %s", path)
    with io.open(path, 'w', encoding='utf-8') as fout:
        fout.write(text)
