import calendar
from datetime import datetime, timezone
import logging

import aniso8601

from .exceptions import ConfigurationError
from .schema import Schema
from .utils import get_value

logger = logging.getLogger(__name__)


def _add_null(schema, field):
    """
    Return a copy of ``schema`` that also accepts ``null``.
    """
    schema = dict(schema)
    type_ = schema.get("type")

    if "enum" in schema and None not in schema["enum"]:
        schema["enum"] = list(schema["enum"]) + [None]

    if isinstance(type_, (str, dict)):
        schema["type"] = [type_, "null"]
    elif type_ is not None:
        schema["type"] = list(type_) + ["null"]
    elif "anyOf" in schema:
        if not any("null" in choice.get("type", ()) for choice in schema["anyOf"]):
            schema["anyOf"] = list(schema["anyOf"]) + [{"type": "null"}]
    else:
        logger.warning('%r is nullable but "null" type cannot be added', field)
    return schema


class Raw(Schema):
    """
    A property of a remote resource, described by any JSON-schema.

    A field decodes values received from the server with :meth:`convert` and encodes values sent to the server with
    :meth:`format`. ``io`` decides in which bodies the field takes part:

    ===  ========================================================
    io   Meaning
    ===  ========================================================
    r    read from response bodies
    c    sent when an item is created (``POST``)
    u    sent when an item is updated (``PUT``)
    w    shorthand for ``cu``
    ===  ========================================================

    >>> fields.Raw({"type": "string"}, io="r").response
    {'type': 'string', 'readOnly': True}

    :param schema: JSON-schema, a ``(response, request)`` tuple of schemas, or a callable returning either
    :param str io: default ``"rw"``
    :param default: value used when the server omits the property; may be a callable with no arguments
    :param str attribute: Python attribute name, if it differs from the property name in the body
    :param bool nullable: whether ``null`` is a valid value
    :param str title: optional JSON-schema title
    :param str description: optional JSON-schema description
    """

    def __init__(self, schema, io="rw", default=None, attribute=None, nullable=False, title=None, description=None):
        self._schema = schema
        self._default = default
        self.attribute = attribute
        self.nullable = nullable
        self.title = title
        self.description = description
        self.io = io

    @property
    def io(self):
        return self._io

    @io.setter
    def io(self, value):
        expanded = value.replace('w', 'cu')
        self._io = ''.join(letter for letter in 'cru' if letter in expanded)

    @property
    def default(self):
        return self._default() if callable(self._default) else self._default

    @default.setter
    def default(self, value):
        self._default = value

    def _complete(self, schema, readable):
        if "null" in schema.get("type", ()):
            self.nullable = True
        elif self.nullable:
            schema = _add_null(schema, self)
        else:
            schema = dict(schema)

        if readable and self.io == "r":
            schema["readOnly"] = True

        schema.update((key, getattr(self, key)) for key in ("title", "description") if getattr(self, key) is not None)
        return schema

    def schema(self):
        schema = self._schema() if callable(self._schema) else self._schema

        if isinstance(schema, Schema):
            response, request = schema.response, schema.request
        elif isinstance(schema, tuple):
            response, request = schema
        else:
            response = request = schema

        return self._complete(response, True), self._complete(request, False)

    def format(self, value):
        """
        Encode a Python value for a request body.
        """
        return None if value is None else self.formatter(value)

    def convert(self, instance, validate=True):
        """
        Decode a value from a response body, validating it against :attr:`response` unless ``validate`` is ``False``.

        :raises InvalidBody: if validation failed
        """
        if validate:
            instance = super(Raw, self).convert(instance)
        return None if instance is None else self.converter(instance)

    def formatter(self, value):
        return value

    def converter(self, value):
        return value

    def output(self, key, obj):
        return self.format(get_value(self.attribute or key, obj, self.default))

    def __repr__(self):
        return '{}(attribute={!r})'.format(self.__class__.__name__, self.attribute)


class Any(Raw):
    """
    Accepts any JSON value.
    """

    def __init__(self, **kwargs):
        super(Any, self).__init__({"type": ["null", "string", "number", "boolean", "object", "array"]}, **kwargs)


def _as_field(parent, cls_or_instance):
    field = cls_or_instance() if isinstance(cls_or_instance, type) else cls_or_instance
    if isinstance(field, Raw):
        return field
    if isinstance(field, Schema):
        return Raw(field)
    raise ConfigurationError('{} expected a field or schema, got {}'.format(parent.__class__.__name__,
                                                                                  field.__class__.__name__))


class Custom(Raw):
    """
    A field with any schema and optional functions for decoding and encoding values.

    :param dict schema: JSON-schema
    :param callable converter: applied to values received from the server
    :param callable formatter: applied to values sent to the server
    """

    def __init__(self, schema, converter=None, formatter=None, **kwargs):
        super(Custom, self).__init__(schema, **kwargs)
        self._converter = converter
        self._formatter = formatter

    def format(self, value):
        return value if self._formatter is None else self._formatter(value)

    def converter(self, value):
        return value if self._converter is None else self._converter(value)


class Array(Raw):
    """
    A list of values of a single field type. Defaults to an empty list.

    :param cls_or_instance: field class or instance of the items
    :param int min_items: minimum number of items
    :param int max_items: maximum number of items
    :param bool unique: if ``True``, all items must be unique
    """

    def __init__(self, cls_or_instance, min_items=None, max_items=None, unique=None, **kwargs):
        self.container = _as_field(self, cls_or_instance)

        constraints = {key: value for key, value in (('minItems', min_items),
                                                      ('maxItems', max_items),
                                                      ('uniqueItems', unique)) if value is not None}

        def schema():
            return (dict(constraints, type="array", items=self.container.response),
                    dict(constraints, type="array", items=self.container.request))

        kwargs.setdefault('default', list)
        super(Array, self).__init__(schema, **kwargs)

    def format(self, value):
        if value is None:
            return None if self.nullable else []
        return [self.container.format(item) for item in value]

    def converter(self, value):
        return [self.container.convert(item, validate=False) for item in value]


List = Array


class Object(Raw):
    """
    A JSON object, either with named properties or with properties that all share one field type. Defaults to an empty
    dictionary.

    :param properties: a dictionary of ``{property: field}`` pairs, or a field class or instance for all properties
    """

    def __init__(self, properties=None, **kwargs):
        if isinstance(properties, dict):
            self.properties, self.additional_properties = properties, None
        else:
            self.properties = None
            self.additional_properties = Any() if properties is None else _as_field(self, properties)

        def schema():
            return self._object_schema('response'), self._object_schema('request')

        kwargs.setdefault('default', dict)
        super(Object, self).__init__(schema, **kwargs)

    def _object_schema(self, direction):
        schema = {"type": "object"}
        if self.properties is not None:
            schema["properties"] = {key: getattr(field, direction) for key, field in self.properties.items()}
            schema["additionalProperties"] = False
        else:
            schema["additionalProperties"] = getattr(self.additional_properties, direction)
        return schema

    def formatter(self, value):
        if self.properties is not None:
            return {key: field.output(key, value) for key, field in self.properties.items()}
        return {key: self.additional_properties.format(item) for key, item in value.items()}

    def converter(self, value):
        if self.properties is not None:
            return {field.attribute or key: field.convert(value[key], validate=False)
                    for key, field in self.properties.items() if key in value}
        return {key: self.additional_properties.convert(item, validate=False) for key, item in value.items()}


class String(Raw):
    """
    :param int min_length: minimum length
    :param int max_length: maximum length
    :param str pattern: regular expression the string must match
    :param enum: allowed values
    :param str format: JSON-schema format, e.g. ``"email"``
    """

    def __init__(self, min_length=None, max_length=None, pattern=None, enum=None, format=None, **kwargs):
        schema = {"type": "string"}
        schema.update((key, value) for key, value in (('minLength', min_length),
                                                      ('maxLength', max_length),
                                                      ('pattern', pattern),
                                                      ('enum', None if enum is None else list(enum)),
                                                      ('format', format)) if value is not None)
        super(String, self).__init__(schema, **kwargs)


class UUID(String):
    UUID_REGEX = "[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"

    def __init__(self, **kwargs):
        super(UUID, self).__init__(min_length=36, max_length=36, pattern=self.UUID_REGEX, **kwargs)


class Uri(String):
    def __init__(self, **kwargs):
        super(Uri, self).__init__(format="uri", **kwargs)


class Email(String):
    def __init__(self, **kwargs):
        super(Email, self).__init__(format="email", **kwargs)


class Date(Raw):
    """
    An EJSON date, ``{"$date": MILLISECONDS_SINCE_EPOCH}``, decoded to a :class:`datetime.date` in UTC.
    """

    def __init__(self, **kwargs):
        super(Date, self).__init__({
            "type": "object",
            "properties": {
                "$date": {
                    "type": "integer"
                }
            },
            "additionalProperties": False
        }, **kwargs)

    @staticmethod
    def _timestamp(value):
        return datetime.fromtimestamp(value["$date"] / 1000, timezone.utc)

    def formatter(self, value):
        return {"$date": calendar.timegm(value.timetuple()) * 1000}

    def converter(self, value):
        return self._timestamp(value).date()


class DateTime(Date):
    """
    An EJSON date-time, decoded to a timezone-aware :class:`datetime.datetime` in UTC.
    """

    def formatter(self, value):
        return {"$date": calendar.timegm(value.utctimetuple()) * 1000}

    def converter(self, value):
        return self._timestamp(value)


class DateString(Raw):
    """
    An ISO-8601 date string, e.g. ``"2015-01-01"``.
    """

    def __init__(self, **kwargs):
        super(DateString, self).__init__({"type": "string", "format": "date"}, **kwargs)

    def formatter(self, value):
        return value.strftime('%Y-%m-%d')

    def converter(self, value):
        return aniso8601.parse_date(value)


class DateTimeString(Raw):
    """
    An ISO-8601 date-time string, e.g. ``"2015-01-01T12:30:00+00:00"``.
    """

    def __init__(self, **kwargs):
        super(DateTimeString, self).__init__({"type": "string", "format": "date-time"}, **kwargs)

    def formatter(self, value):
        return value.isoformat()

    def converter(self, value):
        return aniso8601.parse_datetime(value)


class Boolean(Raw):
    def __init__(self, **kwargs):
        super(Boolean, self).__init__({"type": "boolean"}, **kwargs)

    def format(self, value):
        if value is None and self.nullable:
            return None
        return bool(value)


def _bounds(minimum, maximum, exclusive_minimum=False, exclusive_maximum=False):
    bounds = {}
    if minimum is not None:
        bounds['minimum'] = minimum
        if exclusive_minimum:
            bounds['exclusiveMinimum'] = True
    if maximum is not None:
        bounds['maximum'] = maximum
        if exclusive_maximum:
            bounds['exclusiveMaximum'] = True
    return bounds


class Integer(Raw):
    def __init__(self, minimum=None, maximum=None, **kwargs):
        super(Integer, self).__init__(dict(_bounds(minimum, maximum), type="integer"), **kwargs)

    def formatter(self, value):
        return int(value)


class PositiveInteger(Integer):
    """
    An :class:`Integer` of at least 1.
    """

    def __init__(self, maximum=None, **kwargs):
        super(PositiveInteger, self).__init__(minimum=1, maximum=maximum, **kwargs)


class Number(Raw):
    def __init__(self, minimum=None, maximum=None, exclusive_minimum=False, exclusive_maximum=False, **kwargs):
        schema = dict(_bounds(minimum, maximum, exclusive_minimum, exclusive_maximum), type="number")
        super(Number, self).__init__(schema, **kwargs)

    def formatter(self, value):
        return float(value)
