class HeaderDecorator(object):
    """
    Supplies headers that are merged into every outgoing request.

    A decorator can be set on the :class:`potion_client.transport.HttpSource` or, to override it for a sequence of
    calls, on a :class:`potion_client.context.Context`.
    """

    def headers(self):
        """
        :return: a dictionary of header names to values
        """
        return {}


class StaticHeaderDecorator(HeaderDecorator):

    def __init__(self, headers=None, **kwargs):
        self._headers = dict(headers or {}, **kwargs)

    def headers(self):
        return dict(self._headers)


class CallableHeaderDecorator(HeaderDecorator):
    """
    Calls a function without arguments for every request, e.g. to read a token that may change over time.
    """

    def __init__(self, function):
        self.function = function

    def headers(self):
        return dict(self.function() or {})


DEFAULT_HEADER_DECORATOR = HeaderDecorator()
