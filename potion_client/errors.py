import json
from collections import OrderedDict

from werkzeug.http import HTTP_STATUS_CODES

BASE = 'base'


class ResourceErrors(object):
    """
    Validation messages attached to a resource instance, keyed by field name.

    Messages that cannot be attributed to a single field are kept under ``'base'``.
    """

    def __init__(self):
        self._messages = OrderedDict()

    def add(self, field, message):
        self._messages.setdefault(str(field), []).append(message)

    def get(self, field):
        return list(self._messages.get(str(field), ()))

    def __getitem__(self, field):
        return self.get(field)

    def __contains__(self, field):
        return str(field) in self._messages

    def __iter__(self):
        return iter(self._messages)

    def __len__(self):
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self):
        return bool(self._messages)

    def items(self):
        return [(field, list(messages)) for field, messages in self._messages.items()]

    def clear(self):
        self._messages.clear()

    def as_dict(self):
        return OrderedDict(self.items())

    def __repr__(self):
        return '<ResourceErrors {!r}>'.format(dict(self._messages))


class ErrorTranslator(object):
    """
    Converts the body of an unsuccessful response into messages.

    :meth:`convert` returns either a single string or a dictionary mapping field names to one or many messages.
    Understands ``{"errors": {field: messages}}``, the validation format of a Potion server
    (``{"errors": [{"path": [field, ...], "message": ...}]}``) and ``{"message": ...}``; any other body is returned as
    is, or replaced with the reason phrase of the status code when it is empty.
    """

    def convert(self, body, status):
        data = self._decode(body)

        if isinstance(data, dict):
            errors = data.get('errors')
            if isinstance(errors, dict) and errors:
                return errors
            if isinstance(errors, list) and errors:
                return self._convert_error_list(errors, data.get('message'))
            if isinstance(data.get('message'), str):
                return data['message']

        if body:
            return body if isinstance(body, str) else json.dumps(body)
        return HTTP_STATUS_CODES.get(status, 'Unknown Error')

    def attach(self, resource, body, status):
        err = self.convert(body, status)
        if isinstance(err, str):
            resource.errors.add(BASE, err)
            return

        for field, messages in err.items():
            if isinstance(messages, str):
                resource.errors.add(field, messages)
            else:
                for message in messages:
                    resource.errors.add(field, message)

    @staticmethod
    def _decode(body):
        if isinstance(body, (dict, list)):
            return body
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError:
            return None

    @staticmethod
    def _convert_error_list(errors, fallback=None):
        result = OrderedDict()
        for error in errors:
            if not isinstance(error, dict):
                result.setdefault(BASE, []).append(str(error))
                continue

            path = error.get('path') or ()
            field = str(path[0]) if path else BASE
            message = error.get('message')

            if message is None and 'validationOf' in error:
                message = ', '.join('{} {}'.format(k, json.dumps(v)) for k, v in error['validationOf'].items())

            result.setdefault(field, []).append(message or fallback or 'is invalid')
        return result
