import json
import logging
from urllib.parse import quote, urlencode

import requests

from .audit import RequestLog, ResponseLog, LoggingCallLogger
from .config import Config
from .errors import ErrorTranslator
from .exceptions import PermissionDenied, DocumentNotFound, Unknown, ConfigurationError, InvalidArgument
from .headers import DEFAULT_HEADER_DECORATOR
from .signals import request_logged
from .utils import query_value, last_path_segment

logger = logging.getLogger(__name__)


class HttpSource(object):
    """
    The HTTP transport. Executes requests against a base endpoint, adds headers from a header decorator, records
    every request and response with a call logger and translates the response status.

    All collaborators are injected here; a :class:`potion_client.context.Context` may only override the header
    decorator.

    :param str base: base URL, e.g. ``'https://api.example.com/v1'``
    :param header_decorator: default :class:`potion_client.headers.HeaderDecorator`
    :param call_logger: :class:`potion_client.audit.CallLogger` receiving every request/response pair
    :param error_translator: :class:`potion_client.errors.ErrorTranslator` used for failed writes
    :param requests.Session session: optional session, e.g. one with mounted adapters
    :param config: optional :class:`potion_client.config.Config` or dictionary
    """

    def __init__(self, base, header_decorator=None, call_logger=None, error_translator=None, session=None,
                 config=None):
        self.base = base
        self.header_decorator = header_decorator or DEFAULT_HEADER_DECORATOR
        self.call_logger = call_logger or LoggingCallLogger()
        self.error_translator = error_translator or ErrorTranslator()
        self.session = session or requests.Session()
        self.config = config if isinstance(config, Config) else Config(config)

    @property
    def url(self):
        return self.base

    def __repr__(self):
        return '<HttpSource {!r}>'.format(self.base)

    def add_headers(self, context, headers):
        decorator = getattr(context, 'header_decorator', None) or self.header_decorator
        hds = decorator.headers()
        for k, v in hds.items():
            headers[str(k)] = str(v)
        return hds

    def get(self, context, sub, filter=None):
        """
        :return: the response body if the status is 200
        :raises PermissionDenied: on 401
        :raises DocumentNotFound: on 404
        :raises Unknown: on any other status
        """
        path = self.fix_url_encode(sub)
        location = self.append_query(path, self.hash_to_query(filter))
        response, headers = self._request(context, 'get', self.append_query(path, self.encode_query(filter)))

        self._log(RequestLog('get', location, None, headers), response)

        if response.status_code == 401:
            raise PermissionDenied(response.text)
        elif response.status_code == 404:
            raise DocumentNotFound()
        elif response.status_code != 200:
            raise Unknown(response.text, response.status_code)
        return response.text

    def delete_all(self, context, resource_path):
        response, headers = self._request(context, 'delete', resource_path)
        self._log(RequestLog('delete', resource_path, None, headers), response)
        return response.status_code == 200

    def delete(self, context, resource):
        if getattr(resource, 'id', None) is None:
            raise InvalidArgument('To delete an object it must have an id')

        location = resource.resource_location
        response, headers = self._request(context or resource.context, 'delete', location)
        self._log(RequestLog('delete', location, None, headers), response)

        if response.status_code != 200:
            self.error_translator.attach(resource, response.text, response.status_code)
        return response.status_code == 200

    def put(self, context, resource):
        if getattr(resource, 'id', None) is None:
            raise InvalidArgument('To change an object it must have an id')

        body = self._encode(resource, 'update')
        location = resource.resource_location
        response, headers = self._request(context or resource.context, 'put', location, body)
        self._log(RequestLog('put', location, body, headers), response)

        if response.status_code != 200:
            self.error_translator.attach(resource, response.text, response.status_code)
        return response.status_code == 200

    def post(self, context, resource):
        meta = getattr(resource, 'meta', None)
        if meta is None or not meta.get('id_attribute'):
            raise ConfigurationError('new object must have an id attribute')
        if resource.id is not None:
            raise ConfigurationError('new object must not have an id')

        body = self._encode(resource, 'create')
        location = resource.resource_path()
        response, headers = self._request(context or resource.context, 'post', location, body)
        self._log(RequestLog('post', location, body, headers), response)

        if response.status_code == 201:
            created = response.headers.get('Location')
            if created:
                resource.id = last_path_segment(created)
            else:
                logger.warning('%s responded 201 without a Location header', location)
            return True

        self.error_translator.attach(resource, response.text, response.status_code)
        return False

    def hash_to_query(self, hash):
        if not hash:
            return ''
        r = ''
        c = '?'
        for k, v in hash.items():
            r += '{}{}={}'.format(c, k, query_value(v))
            c = '&'
        return r

    @staticmethod
    def encode_query(hash):
        """
        Percent-encodes the keys and values of ``hash`` for a request URL, e.g. ``'name=a%26b'`` for
        ``{'name': 'a&b'}``.
        """
        if not hash:
            return ''
        return urlencode([(str(k), query_value(v)) for k, v in hash.items()], safe='', quote_via=quote)

    @staticmethod
    def append_query(path, query):
        """
        Appends ``query`` (with or without its leading ``?``) to ``path``, joining with ``&`` if ``path`` already
        has a query string.
        """
        query = query.lstrip('?')
        if not query:
            return path
        return path + ('&' if '?' in path else '?') + query

    @staticmethod
    def fix_url_encode(input_url):
        """
        Percent-encodes ``+`` in the query part of ``input_url`` so that it is not decoded as a space.
        """
        head, q_mark, query = input_url.partition('?')
        if not q_mark:
            return input_url
        return head + '?' + query.replace('+', '%2B')

    def _url(self, location):
        if location.startswith(('http://', 'https://')):
            return location
        return '{}/{}'.format(self.base.rstrip('/'), location.lstrip('/'))

    @staticmethod
    def _encode(resource, view):
        hash = resource.to_dict(view)
        hash.pop('id', None)
        hash.pop(resource.meta.id_attribute, None)
        return json.dumps(hash)

    def _request(self, context, method, location, body=None):
        headers = {}
        if body is not None:
            headers['Content-Type'] = 'application/json'
        decorated = self.add_headers(context, headers)

        response = self.session.request(method.upper(),
                                        self._url(location),
                                        headers=headers,
                                        data=body,
                                        timeout=self.config['POTION_CLIENT_TIMEOUT'])
        return response, decorated

    def _log(self, rql, response):
        rsl = ResponseLog(response.status_code, response.text)
        self.call_logger.log(rql, rsl)
        request_logged.send(self, request=rql, response=rsl)
