from .exceptions import ConfigurationError


class Config(dict):
    """
    Configuration of a :class:`potion_client.transport.HttpSource`.

    ==================================  ==============  ==========================================================
    Key                                 Default         Description
    ==================================  ==============  ==========================================================
    ``POTION_CLIENT_DEFAULT_PER_PAGE``  ``None``        Page size sent with listing requests; ``None`` leaves the
                                                        page size to the server.
    ``POTION_CLIENT_MAX_PER_PAGE``      ``100``         Upper bound for any page size requested by a collection.
    ``POTION_CLIENT_TIMEOUT``           ``None``        Timeout in seconds passed to :mod:`requests`.
    ``POTION_CLIENT_PAGE_PARAM``        ``'page'``      Query parameter holding the page number.
    ``POTION_CLIENT_PER_PAGE_PARAM``    ``'per_page'``  Query parameter holding the page size.
    ==================================  ==============  ==========================================================
    """

    def __init__(self, defaults=None, **kwargs):
        super(Config, self).__init__(defaults or {}, **kwargs)
        self.setdefault('POTION_CLIENT_DEFAULT_PER_PAGE', None)
        self.setdefault('POTION_CLIENT_MAX_PER_PAGE', 100)
        self.setdefault('POTION_CLIENT_TIMEOUT', None)
        self.setdefault('POTION_CLIENT_PAGE_PARAM', 'page')
        self.setdefault('POTION_CLIENT_PER_PAGE_PARAM', 'per_page')

    def from_object(self, obj):
        for key in dir(obj):
            if key.isupper():
                self[key] = getattr(obj, key)
        return self

    def per_page(self, requested=None):
        per_page = requested if requested is not None else self['POTION_CLIENT_DEFAULT_PER_PAGE']
        if per_page is None:
            return None
        if per_page < 1:
            raise ConfigurationError('per_page must be a positive integer, got {!r}'.format(per_page))
        return min(per_page, self['POTION_CLIENT_MAX_PER_PAGE'])
