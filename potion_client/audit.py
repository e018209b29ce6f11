import logging
from collections import namedtuple


logger = logging.getLogger(__name__)


class RequestLog(namedtuple('RequestLog', ['method', 'url', 'body', 'headers'])):
    """
    One outgoing request as it was sent.

    :param str method: lower-case HTTP verb, e.g. ``'get'``
    :param str url: path relative to the transport's base, including the query string
    :param body: serialized request body or ``None``
    :param dict headers: headers added by the header decorator
    """
    __slots__ = ()

    def __str__(self):
        return '{} {}'.format(self.method.upper(), self.url)


class ResponseLog(namedtuple('ResponseLog', ['status', 'body'])):
    __slots__ = ()

    def __str__(self):
        return '{} ({} bytes)'.format(self.status, len(self.body or ''))


AuditLog = namedtuple('AuditLog', ['request', 'response'])


class CallLogger(object):
    """
    Base class for audit sinks. A transport calls :meth:`log` once per request with the request and response logs,
    before it interprets the response status.
    """

    def log(self, request_log, response_log):
        raise NotImplementedError()


class NullCallLogger(CallLogger):

    def log(self, request_log, response_log):
        pass


class LoggingCallLogger(CallLogger):
    """
    Writes request and response pairs to a :mod:`logging` logger at ``DEBUG`` level.
    """

    def __init__(self, logger=logger, level=logging.DEBUG):
        self.logger = logger
        self.level = level

    def log(self, request_log, response_log):
        if not self.logger.isEnabledFor(self.level):
            return
        self.logger.log(self.level, 'request: %s headers=%r body=%r',
                        request_log, request_log.headers, request_log.body)
        self.logger.log(self.level, 'response: %s body=%r', response_log, response_log.body)


class MemoryCallLogger(CallLogger):
    """
    Keeps every :class:`AuditLog` pair in insertion order. Useful for sessions that need to inspect their own traffic.
    """

    def __init__(self):
        self.entries = []

    def log(self, request_log, response_log):
        self.entries.append(AuditLog(request_log, response_log))

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    @property
    def requests(self):
        return [entry.request for entry in self.entries]

    def clear(self):
        del self.entries[:]
