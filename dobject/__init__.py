"""dobject Python SDK.

A Python client for digital object servers: authenticated CRUD and search
over JSON objects with binary payloads, access-control lists and JSON
schemas.
"""

from dobject.acls import acl_names, resolve, resolve_acls
from dobject.client import DigitalObjectClient
from dobject.connection import Connection, with_connection
from dobject.entity import DigitalObject, Handle
from dobject.exceptions import (
    AuthenticationError,
    ConflictError,
    ConnectionError,
    DigitalObjectError,
    NotFoundError,
    PermissionError,
    PrincipalNotFoundError,
    ServerError,
    TimeoutError,
    UsageError,
    ValidationError,
)
from dobject.models import (
    AccessControlList,
    ConnectionConfig,
    ObjectMetadata,
    PayloadInfo,
    SearchResponse,
    TokenInfo,
)
from dobject.objects import (
    create_object,
    delete_object,
    delete_payload,
    export_payload,
    get_object,
    process_payload,
    read_object,
    read_payload,
    update_acls,
    update_object,
)
from dobject.payload import Payload, payload
from dobject.query import count, query, query_ids
from dobject.schema import create_schema, get_schema, update_schema

__version__ = "0.1.0"
__all__ = [
    "AccessControlList",
    "AuthenticationError",
    "ConflictError",
    "Connection",
    "ConnectionConfig",
    "ConnectionError",
    "DigitalObject",
    "DigitalObjectClient",
    "DigitalObjectError",
    "Handle",
    "NotFoundError",
    "ObjectMetadata",
    "Payload",
    "PayloadInfo",
    "PermissionError",
    "PrincipalNotFoundError",
    "SearchResponse",
    "ServerError",
    "TimeoutError",
    "TokenInfo",
    "UsageError",
    "ValidationError",
    "acl_names",
    "count",
    "create_object",
    "create_schema",
    "delete_object",
    "delete_payload",
    "export_payload",
    "get_object",
    "get_schema",
    "payload",
    "process_payload",
    "query",
    "query_ids",
    "read_object",
    "read_payload",
    "resolve",
    "resolve_acls",
    "update_acls",
    "update_object",
    "update_schema",
    "with_connection",
]
