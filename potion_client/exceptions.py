from werkzeug.http import HTTP_STATUS_CODES


class ClientException(Exception):
    status_code = None

    def as_dict(self):
        return {
            'status': self.status_code,
            'message': HTTP_STATUS_CODES.get(self.status_code, '')
        }


class InvalidArgument(ClientException, ValueError):

    def __init__(self, message):
        super(InvalidArgument, self).__init__(message)
        self.message = message

    def as_dict(self):
        dct = super(InvalidArgument, self).as_dict()
        dct['message'] = self.message
        return dct


class ConfigurationError(ClientException):

    def __init__(self, message):
        super(ConfigurationError, self).__init__(message)
        self.message = message

    def as_dict(self):
        dct = super(ConfigurationError, self).as_dict()
        dct['message'] = self.message
        return dct


class InvalidBody(ClientException, ValueError):
    """
    Raised when a response body cannot be decoded or does not match the schema of the resource it is built into.
    """

    def __init__(self, message, errors=None):
        super(InvalidBody, self).__init__(message)
        self.message = message
        self.errors = errors or []

    def as_dict(self):
        dct = super(InvalidBody, self).as_dict()
        dct['message'] = self.message
        if self.errors:
            dct['errors'] = [{
                'validationOf': {error.validator: error.validator_value},
                'path': tuple(error.absolute_path),
                'message': error.message
            } for error in self.errors]
        return dct


class DocumentNotFound(ClientException):
    status_code = 404


class SpecifiedDocumentNotFound(DocumentNotFound):

    def __init__(self, id, resource):
        super(SpecifiedDocumentNotFound, self).__init__(
            'No {} with id {!r} could be retrieved'.format(getattr(resource, '__name__', resource), id))
        self.id = id
        self.resource = resource

    def as_dict(self):
        dct = super(SpecifiedDocumentNotFound, self).as_dict()
        dct['item'] = {
            "$type": self.resource.meta.name if hasattr(self.resource, 'meta') else str(self.resource),
            "$id": self.id
        }
        return dct


class PermissionDenied(ClientException):
    status_code = 401

    def __init__(self, body=None):
        super(PermissionDenied, self).__init__(body)
        self.body = body

    def as_dict(self):
        dct = super(PermissionDenied, self).as_dict()
        dct['body'] = self.body
        return dct


class Unknown(ClientException):

    def __init__(self, body=None, status_code=None):
        super(Unknown, self).__init__(body)
        self.body = body
        self.status_code = status_code

    def as_dict(self):
        dct = super(Unknown, self).as_dict()
        dct['body'] = self.body
        return dct
