from .audit import RequestLog, ResponseLog, AuditLog, CallLogger, LoggingCallLogger, MemoryCallLogger, \
    NullCallLogger
from .cache import IdentityCache
from .collection import LazyCollection, Pagination
from .config import Config
from .context import Context
from .errors import ErrorTranslator, ResourceErrors
from .exceptions import ClientException, InvalidArgument, ConfigurationError, InvalidBody, DocumentNotFound, \
    SpecifiedDocumentNotFound, PermissionDenied, Unknown
from .filters import Filter, Scope
from .headers import HeaderDecorator, StaticHeaderDecorator, CallableHeaderDecorator, DEFAULT_HEADER_DECORATOR
from .resource import Resource
from . import fields, signals
from .transport import HttpSource

__all__ = (
    'Resource',
    'Context',
    'HttpSource',
    'Filter',
    'Scope',
    'LazyCollection',
    'Pagination',
    'IdentityCache',
    'Config',
    'ErrorTranslator',
    'ResourceErrors',
    'HeaderDecorator',
    'StaticHeaderDecorator',
    'CallableHeaderDecorator',
    'DEFAULT_HEADER_DECORATOR',
    'RequestLog',
    'ResponseLog',
    'AuditLog',
    'CallLogger',
    'LoggingCallLogger',
    'MemoryCallLogger',
    'NullCallLogger',
    'ClientException',
    'InvalidArgument',
    'ConfigurationError',
    'InvalidBody',
    'DocumentNotFound',
    'SpecifiedDocumentNotFound',
    'PermissionDenied',
    'Unknown',
    'fields',
    'signals',
)
