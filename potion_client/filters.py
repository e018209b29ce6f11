from .collection import LazyCollection
from .exceptions import ConfigurationError


class ResourceBound(object):
    resource = None
    name = None

    def _on_bind(self, resource):
        pass

    def bind(self, resource, name=None):
        if self.resource is None:
            self.resource = resource
            if self.name is None:
                self.name = name
            self._on_bind(resource)
        elif self.resource != resource:
            return self.rebind(resource, name)
        return self

    def rebind(self, resource, name=None):
        raise NotImplementedError('{} is already bound to {}'
                                  ' and does not support rebinding to {}'.format(repr(self), self.resource, resource))


class Filter(ResourceBound):
    """
    A named predicate that is applied client-side to instances of a resource.

    The predicate is called with the instance followed by any arguments given when the filter is applied:

    .. code-block:: python

        class Thing(Resource):
            large = Filter(lambda thing, limit=10: thing.size > limit)

        Thing.large(context, 20)                # filters Thing.all(context)
        Thing.large.apply(things, 20)           # filters an already retrieved collection

    :param callable predicate: a function returning ``True`` for instances to keep
    :param str name: optional; defaults to the attribute name the filter is assigned to
    :raises ConfigurationError: if no predicate is given
    """

    def __init__(self, predicate=None, name=None):
        if predicate is None:
            raise ConfigurationError('You must specify a predicate for a filter')
        self.predicate = predicate
        self.name = name

    def rebind(self, resource, name=None):
        return self.__class__(self.predicate, name=self.name or name).bind(resource)

    def apply(self, collection, *args):
        return [instance for instance in collection if self.predicate(instance, *args)]

    def __call__(self, context, *args):
        return self.apply(self.resource.all(context), *args)

    def __repr__(self):
        return '<Filter {!r} on {}>'.format(self.name, getattr(self.resource, '__name__', None))


class Scope(ResourceBound):
    """
    A named view over the listing of a resource.

    Without a predicate, a scope is a server-side sub-collection at :meth:`Resource.scoped_path`; with a predicate it
    is a client-side selection from :meth:`Resource.all`.

    :param str resource_name: path segment of the scope; defaults to the scope's name. A segment starting with ``?``
        is appended to the resource path without a ``/``.
    :param callable predicate: optional client-side predicate
    :param str name: optional; defaults to the attribute name the scope is assigned to
    """

    def __init__(self, resource_name=None, predicate=None, name=None):
        self.resource_name = resource_name
        self.predicate = predicate
        self.name = name

    def rebind(self, resource, name=None):
        return self.__class__(self.resource_name, self.predicate, name=self.name or name).bind(resource)

    @property
    def path(self):
        return self.resource.scoped_path(self.resource_name or self.name)

    def __call__(self, context, filter=None):
        if self.predicate is not None:
            return self.resource.all(context, filter).select(self.predicate)

        return LazyCollection(context, self.resource, self.path, filter)

    def __repr__(self):
        return '<Scope {!r} on {}>'.format(self.name, getattr(self.resource, '__name__', None))
