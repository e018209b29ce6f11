from collections import OrderedDict

from jsonschema import Draft4Validator, ValidationError, FormatChecker
from werkzeug.utils import cached_property

from .exceptions import InvalidBody

VIEWS = OrderedDict((
    ('read', 'r'),
    ('create', 'c'),
    ('update', 'u'),
))


class Schema(object):
    """
    Base class of everything described by a JSON-schema.

    :attr:`response` describes data received from the server; :attr:`request` (also :attr:`create`) and
    :attr:`update` describe data sent to it. Subclasses implement :meth:`schema`.
    """

    def schema(self):
        """
        :return: a JSON-schema used in every direction, a ``(response, request)`` tuple, or a
            ``(read, create, update)`` tuple
        """
        raise NotImplementedError()

    def _view(self, index):
        schema = self.schema()
        if not isinstance(schema, tuple):
            return schema
        return schema[min(index, len(schema) - 1)]

    @cached_property
    def response(self):
        return self._view(0)

    @cached_property
    def request(self):
        return self._view(1)

    create = request

    @cached_property
    def update(self):
        return self._view(2)

    @cached_property
    def _validator(self):
        Draft4Validator.check_schema(self.response)
        return Draft4Validator(self.response, format_checker=FormatChecker())

    def format(self, value):
        return value

    def convert(self, instance):
        """
        Validate a value decoded from a response body against :attr:`response`.

        :raises InvalidBody: with every validation error, if the value does not match
        """
        try:
            self._validator.validate(instance)
        except ValidationError as ve:
            raise InvalidBody(ve.message, list(self._validator.iter_errors(instance)))
        return instance


class FieldSet(Schema):
    """
    The schema of a resource: a dictionary of :class:`fields.Raw` objects keyed by property name.

    The ``read`` view contains every field with ``r`` in its ``io``; the ``create`` and ``update`` views contain the
    fields with ``c`` and ``u`` and reject any other property.

    :param dict fields: a dictionary of :class:`fields.Raw` objects
    """

    def __init__(self, fields):
        self.fields = fields

    def schema(self):
        schemas = []
        for view, io in VIEWS.items():
            schema = {"type": "object"}
            if view != 'read':
                schema["additionalProperties"] = False
            schema["properties"] = OrderedDict(
                (key, field.response if view == 'read' else field.request)
                for key, field in self.fields.items() if io in field.io)
            schemas.append(schema)
        return tuple(schemas)

    def format(self, item, view='read'):
        """
        Encode the values of ``item`` (a dictionary or object keyed by field attribute) for ``view``.
        """
        io = VIEWS[view]
        return OrderedDict((key, field.output(key, item)) for key, field in self.fields.items() if io in field.io)

    def convert(self, instance):
        """
        Validate a body received from the server and decode its values. Fields missing from the body are set to
        their default.

        :param dict instance: decoded JSON object
        :return: a dictionary keyed by field attribute
        """
        instance = super(FieldSet, self).convert(instance)
        return {field.attribute or key: field.convert(instance[key], validate=False) if key in instance
                else field.default
                for key, field in self.fields.items()}
