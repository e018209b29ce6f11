from .cache import IdentityCache


class Context(object):
    """
    Carries the state shared by a sequence of operations, typically one per request or session.

    :param transport: the :class:`potion_client.transport.HttpSource` used for all calls in this context
    :param IdentityCache cache: optional cache; a new, empty cache is created by default
    :param header_decorator: optional :class:`potion_client.headers.HeaderDecorator` that replaces the transport's
        decorator for calls made in this context
    """

    def __init__(self, transport, cache=None, header_decorator=None):
        self.transport = transport
        self.cache = cache if cache is not None else IdentityCache()
        self.header_decorator = header_decorator

    def derive(self, header_decorator=None):
        """
        Return a new context that shares this context's transport and cache.
        """
        return Context(self.transport,
                       cache=self.cache,
                       header_decorator=header_decorator or self.header_decorator)

    def __repr__(self):
        return '<Context transport={!r} cached={}>'.format(self.transport, len(self.cache))
