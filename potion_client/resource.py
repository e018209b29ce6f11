import json
import logging

import requests

from .collection import LazyCollection
from .errors import ResourceErrors
from .exceptions import (ClientException, ConfigurationError, DocumentNotFound, InvalidArgument, InvalidBody,
                         SpecifiedDocumentNotFound)
from .filters import Filter, Scope
from .schema import FieldSet
from .signals import before_create, after_create, before_update, after_update, before_delete, after_delete, \
    item_loaded
from .utils import AttributeDict

logger = logging.getLogger(__name__)

STUB = 'stub'
MATERIALIZED = 'materialized'
FAILED = 'failed'

RESERVED_ATTRIBUTES = frozenset(('id', 'context', 'errors', 'meta', 'schema', 'filters', 'scopes'))


class ResourceMeta(type):

    def __new__(mcs, name, bases, members):
        class_ = super(ResourceMeta, mcs).__new__(mcs, name, bases, members)
        class_.meta = meta = AttributeDict(getattr(class_, 'meta', {}) or {})
        class_.filters = filters = {}
        class_.scopes = scopes = {}

        for base in bases:
            if hasattr(base, 'Meta'):
                meta.update({k: v for k, v in base.Meta.__dict__.items() if not k.startswith('__')})

            for registry, inherited in ((filters, getattr(base, 'filters', None)),
                                        (scopes, getattr(base, 'scopes', None))):
                for n, m in (inherited or {}).items():
                    bound = m.bind(class_, n)
                    registry[n] = bound
                    if getattr(class_, n, None) is m:
                        setattr(class_, n, bound)

        if 'Meta' in members:
            changes = members['Meta'].__dict__
            for k, v in changes.items():
                if not k.startswith('__'):
                    meta[k] = v

            if not changes.get('name', None):
                meta['name'] = name.lower()
        else:
            meta['name'] = name.lower()

        schema = {}
        for base in bases:
            if hasattr(base, 'Schema'):
                schema.update(base.Schema.__dict__)

        if 'Schema' in members:
            schema.update(members['Schema'].__dict__)

        schema = {k: f for k, f in schema.items() if not k.startswith('__')}
        if schema:
            class_.schema = fs = FieldSet(schema)

            for field_name in meta.get('read_only_fields', ()):
                if field_name in fs.fields:
                    fs.fields[field_name].io = "r"

            for field_name in meta.get('write_only_fields', ()):
                if field_name in fs.fields:
                    fs.fields[field_name].io = "w"

            attributes = frozenset(field.attribute or key for key, field in fs.fields.items())
            reserved = attributes & RESERVED_ATTRIBUTES
            if reserved:
                raise ConfigurationError('{} cannot declare fields named {}'.format(name, ', '.join(sorted(reserved))))
            shadowed = [attribute for attribute in attributes if hasattr(class_, attribute)]
            if shadowed:
                raise ConfigurationError('{} fields shadow class attributes: {}'.format(name, ', '.join(sorted(shadowed))))
            class_._attributes = attributes
        else:
            class_.schema = None
            class_._attributes = frozenset()

        for n, m in members.items():
            if isinstance(m, Filter):
                bound = m.bind(class_, n)
                filters[bound.name] = bound
            elif isinstance(m, Scope):
                bound = m.bind(class_, n)
                scopes[bound.name] = bound

        return class_


class Resource(object, metaclass=ResourceMeta):
    """
    A remote resource mapped onto a Python class.

    A resource is configured using the `Schema` and `Meta` attributes as well as any class attributes of type
    :class:`filters.Filter` or :class:`filters.Scope`.

    :class:`Meta` class attributes:

    =====================  ==============================  ==============================================================================
    Attribute name         Default                         Description
    =====================  ==============================  ==============================================================================
    name                   ---                             Name of the resource and its collection path; defaults to the lower-case of the
                                                           class name
    id_attribute           ``'id'``                        Key holding the identifier in response bodies. ``None`` for resources that
                                                           cannot be created.
    body_root              ``'result'``                    Key of the envelope holding the item or the list of items. ``None`` if the
                                                           body is not wrapped in an envelope.
    result_count           ``'result_count'``              Key of the envelope holding the total number of items in a listing.
    per_page               ``None``                        Page size sent with listing requests; ``None`` uses the transport's default.
    read_only_fields       ``()``                          A list of fields that are read but never sent in `POST` and `PUT` requests.
    write_only_fields      ``()``                          A list of fields that are sent but not expected in responses.
    =====================  ==============================  ==============================================================================

    Usage example:

    .. code-block:: python

        class Thing(Resource):
            class Schema:
                name = fields.String()
                size = fields.Integer(nullable=True)

            class Meta:
                name = 'things'

            active = Scope()
            large = Filter(lambda thing, limit=10: thing.size > limit)

        context = Context(HttpSource('https://api.example.com'))
        thing = Thing.find(context, 42)
        big_active_things = Thing.large.apply(Thing.active(context), 20)

    .. attribute:: meta

        A :class:`AttributeDict` of configuration attributes collected from the :class:`Meta` attributes of the base classes.

    .. attribute:: schema

        A :class:`FieldSet` containing fields collected from the :class:`Schema` attributes of the base classes.

    .. attribute:: filters

        A dictionary of :class:`Filter` objects registered with this resource, keyed by name.

    .. attribute:: scopes

        A dictionary of :class:`Scope` objects registered with this resource, keyed by name.
    """
    meta = None
    schema = None
    filters = None
    scopes = None

    class Meta:
        name = None
        id_attribute = 'id'
        body_root = 'result'
        result_count = 'result_count'
        per_page = None
        read_only_fields = ()
        write_only_fields = ()

    def __init__(self, context, id=None, **properties):
        self.context = context
        self.id = id
        self.errors = ResourceErrors()
        self._state = MATERIALIZED
        self._properties = {}

        if self.schema:
            for key, field in self.schema.fields.items():
                self._properties[field.attribute or key] = field.default
        self._properties.update(properties)

    def __getattr__(self, name):
        if name.startswith('_') or '_properties' not in self.__dict__:
            raise AttributeError(name)

        if self._state == STUB and (name in self._attributes or not self.schema):
            self._materialize()

        try:
            return self._properties[name]
        except KeyError:
            raise AttributeError("'{}' object has no attribute '{}'".format(self.__class__.__name__, name))

    def __setattr__(self, name, value):
        if name in self._attributes:
            if self._state == STUB:
                self._materialize()
            self._properties[name] = value
        else:
            super(Resource, self).__setattr__(name, value)

    def __repr__(self):
        state = '' if self._state == MATERIALIZED else ' ({})'.format(self._state)
        return '<{} id={!r}{}>'.format(self.__class__.__name__, self.id, state)

    @property
    def is_stub(self):
        return self._state == STUB

    @property
    def load_failed(self):
        return self._state == FAILED

    @classmethod
    def resource_path(cls):
        return '{}'.format(cls.meta.name)

    @classmethod
    def scoped_path(cls, scope_name):
        scope_name = str(scope_name)
        return cls.resource_path() + ('' if scope_name.startswith('?') else '/') + scope_name

    @property
    def resource_location(self):
        if self.id is None:
            raise InvalidArgument('{} has no id and therefore no location'.format(self.__class__.__name__))
        return self.resource_path() + '/' + str(self.id)

    @staticmethod
    def decode(body):
        if isinstance(body, (dict, list)):
            return body
        try:
            return json.loads(body)
        except (TypeError, ValueError) as e:
            raise InvalidBody('Response body is not valid JSON: {}'.format(e))

    @classmethod
    def body_root(cls, body):
        """
        Decode ``body`` and return the value under the ``Meta.body_root`` key of the envelope.
        """
        data = cls.decode(body)
        root = cls.meta.get('body_root')
        if root is None:
            return data
        if not isinstance(data, dict):
            return None
        return data.get(root)

    @classmethod
    def build(cls, context, properties):
        """
        Create an instance from a decoded body.

        :raises InvalidBody: if ``properties`` does not match the schema of this resource
        """
        instance = cls(context)
        instance._load(properties)
        return instance

    def _load(self, properties):
        if not isinstance(properties, dict):
            raise InvalidBody('Expected an object for {}, got {}'.format(self.__class__.__name__,
                                                                         type(properties).__name__))
        properties = dict(properties)
        id = properties.pop(self.meta.id_attribute, None) if self.meta.id_attribute else None

        if self.schema:
            properties = self.schema.convert(properties)

        self._properties.update(properties)
        if id is not None:
            self.id = id

    def _materialize(self):
        # at most one request per stub, even if it fails
        self._state = FAILED
        location = '{}/{}'.format(self.resource_path(), self.id)
        body = self.body_root(self.context.transport.get(self.context, location))
        self._load(body or {})
        self._state = MATERIALIZED
        item_loaded.send(self.__class__, item=self)

    @classmethod
    def find(cls, context, id):
        """
        Return the item with the given ``id``, from the context's cache if it has been retrieved before.

        :raises InvalidArgument: if ``id`` is ``None`` or empty
        :raises SpecifiedDocumentNotFound: if the item could not be retrieved or built, for whatever reason
        """
        if id is None or id == '':
            raise InvalidArgument('Document Id must not be blank')

        full_resource_path = '{}/{}'.format(cls.resource_path(), id)
        return context.cache.lookup(full_resource_path, lambda: cls._fetch(context, id, full_resource_path))

    @classmethod
    def _fetch(cls, context, id, full_resource_path):
        try:
            body = cls.body_root(context.transport.get(context, full_resource_path))

            if not body:
                raise InvalidBody('Response body must not be empty for {}'.format(full_resource_path))

            if isinstance(body, dict) and cls.meta.id_attribute:
                body = dict(body, **{cls.meta.id_attribute: id})
            return cls.build(context, body)
        except (ClientException, requests.RequestException, ValueError) as e:
            logger.info('%s: %s', full_resource_path, e)
            raise SpecifiedDocumentNotFound(id, cls) from e

    @classmethod
    def by_url(cls, context, url, filter=None):
        """
        Retrieve a listing from an arbitrary path, with ``filter`` as additional query parameters.

        :return: a dictionary with ``result_count`` and ``collection`` keys, or ``[]`` if the path does not exist
        """
        try:
            response = context.transport.get(context, url, filter)
        except DocumentNotFound:
            logger.info('DocumentNotFound for %s gracefully returning []', url)
            return []

        data = cls.decode(response)
        result_count = data.get(cls.meta.result_count) if isinstance(data, dict) else None
        body = cls.body_root(data) or []

        collection = [cls.build(context, h) for h in body]
        return {
            'result_count': result_count,
            'collection': collection
        }

    @classmethod
    def all(cls, context, filter=None):
        return LazyCollection(context, cls, cls.resource_path(), filter)

    @classmethod
    def first(cls, context, filter=None):
        return cls.all(context, filter).first

    @classmethod
    def last(cls, context, filter=None):
        return cls.all(context, filter).last

    @classmethod
    def filter(cls, name, predicate=None):
        """
        Register a named client-side filter.

        :raises ConfigurationError: if no predicate is given
        """
        cls.filters[name] = bound = Filter(predicate, name=name).bind(cls)
        return bound

    @classmethod
    def _registered(cls, registry, kind, name):
        try:
            return registry[name]
        except KeyError:
            raise ConfigurationError('{} has no {} named {!r}'.format(cls.__name__, kind, name))

    @classmethod
    def apply_filter(cls, name, collection, *args):
        return cls._registered(cls.filters, 'filter', name).apply(collection, *args)

    @classmethod
    def filtered(cls, name, context, *args):
        return cls._registered(cls.filters, 'filter', name)(context, *args)

    @classmethod
    def scope(cls, name, resource_name=None, predicate=None):
        """
        Register a named scope: a sub-collection at :meth:`scoped_path` or, if a predicate is given, a client-side
        selection from :meth:`all`.
        """
        cls.scopes[name] = bound = Scope(resource_name, predicate, name=name).bind(cls)
        return bound

    @classmethod
    def scoped(cls, name, context, filter=None):
        return cls._registered(cls.scopes, 'scope', name)(context, filter)

    @classmethod
    def stub(cls, context, stub_id):
        """
        Return an instance holding only ``stub_id``. The item is retrieved once, when a property is first accessed.
        """
        n = cls(context, id=stub_id)
        n._state = STUB
        return n

    @classmethod
    def delete_all(cls, context):
        return context.transport.delete_all(context, cls.resource_path())

    def to_dict(self, view='read'):
        if self._state == STUB:
            self._materialize()

        if self.schema:
            data = self.schema.format(self._properties, view)
        else:
            data = dict(self._properties)

        if view == 'read' and self.id is not None and self.meta.id_attribute:
            data[self.meta.id_attribute] = self.id
        return data

    def reload(self):
        """
        Evict this item from the context's cache, retrieve it again and update this instance.

        :return: the fresh state as a dictionary
        """
        self.context.cache.remove(self.resource_location)
        fresh = self.find(self.context, self.id)
        self._properties.update(fresh._properties)
        self._state = MATERIALIZED
        return fresh.to_dict()

    def save(self):
        """
        Create this item if it has no id or update it otherwise.

        Validation errors reported by the server are added to :attr:`errors`.

        :return: ``True`` on success
        """
        self.errors.clear()
        transport = self.context.transport

        if self.id is None:
            before_create.send(self.__class__, item=self)
            success = transport.post(self.context, self)
            if success:
                after_create.send(self.__class__, item=self)
        else:
            before_update.send(self.__class__, item=self)
            success = transport.put(self.context, self)
            if success:
                after_update.send(self.__class__, item=self)
        return success

    def destroy(self):
        self.errors.clear()
        location = self.resource_location

        before_delete.send(self.__class__, item=self)
        success = self.context.transport.delete(self.context, self)
        if success:
            self.context.cache.remove(location)
            after_delete.send(self.__class__, item=self)
        return success
