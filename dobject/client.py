"""Single-object client bundling every dobject operation."""

import os
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from dobject import objects
from dobject.acls import acl_names
from dobject.connection import Connection
from dobject.entity import DigitalObject, Handle
from dobject.models import TokenInfo
from dobject.objects import UNCHANGED, HandleLike, Payloads
from dobject.query import SortFields, count, query, query_ids
from dobject.schema import SchemaSource, create_schema, get_schema, update_schema


class DigitalObjectClient:
    """Client for a digital object server.

    This client wraps a :class:`Connection` and exposes the module-level
    operations as methods, so callers need only one object.

    Example:
        with DigitalObjectClient.login("https://localhost:8443", "alice", "secret") as client:
            obj = client.create_object({"name": "item1"}, "Document")
            obj = client.update_object(obj, "y", json_pointer="/description")
            client.delete_object(obj)
    """

    def __init__(self, connection: Connection) -> None:
        """Initialize the client.

        Args:
            connection: An open connection
        """
        self.connection = connection

    @classmethod
    def login(
        cls,
        host: str,
        username: str,
        password: Optional[str] = None,
        verify: bool = True,
        **kwargs: Any,
    ) -> "DigitalObjectClient":
        """Log in; see :meth:`Connection.login`."""
        return cls(Connection.login(host, username, password, verify=verify, **kwargs))

    @classmethod
    def anonymous(cls, host: str, verify: bool = True, **kwargs: Any) -> "DigitalObjectClient":
        """Open an unauthenticated client; see :meth:`Connection.anonymous`."""
        return cls(Connection.anonymous(host, verify=verify, **kwargs))

    @classmethod
    def from_config(
        cls, path: Union[str, "os.PathLike[str]"] = "config.json", **kwargs: Any
    ) -> "DigitalObjectClient":
        """Log in with a JSON config file; see :meth:`Connection.from_config`."""
        return cls(Connection.from_config(path, **kwargs))

    def create_object(
        self,
        content: Any,
        type_name: str,
        handle: Optional[str] = None,
        suffix: Optional[str] = None,
        dry_run: bool = False,
        payloads: Payloads = None,
        acl: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> DigitalObject:
        """Create an object; see :func:`dobject.objects.create_object`."""
        return objects.create_object(
            self.connection,
            content,
            type_name,
            handle=handle,
            suffix=suffix,
            dry_run=dry_run,
            payloads=payloads,
            acl=acl,
        )

    def get_object(self, handle: HandleLike) -> DigitalObject:
        """Read an object; see :func:`dobject.objects.get_object`."""
        return objects.get_object(self.connection, handle)

    def read_object(
        self,
        handle: HandleLike,
        json_pointer: Optional[str] = None,
        json_filter: Union[None, str, Sequence[str]] = None,
    ) -> Any:
        """Read part of an object; see :func:`dobject.objects.read_object`."""
        return objects.read_object(
            self.connection, handle, json_pointer=json_pointer, json_filter=json_filter
        )

    def update_object(
        self,
        obj: DigitalObject,
        content: Any = UNCHANGED,
        json_pointer: Optional[str] = None,
        type_name: Optional[str] = None,
        dry_run: bool = False,
        payloads: Payloads = None,
        payload_to_delete: Optional[str] = None,
    ) -> DigitalObject:
        """Update an object; see :func:`dobject.objects.update_object`."""
        return objects.update_object(
            obj,
            content=content,
            json_pointer=json_pointer,
            type_name=type_name,
            dry_run=dry_run,
            payloads=payloads,
            payload_to_delete=payload_to_delete,
        )

    def update_acls(
        self,
        obj: DigitalObject,
        readers: Sequence[str] = (),
        writers: Sequence[str] = (),
        dry_run: bool = False,
    ) -> DigitalObject:
        """Replace an object's ACL; see :func:`dobject.objects.update_acls`."""
        return objects.update_acls(obj, readers=readers, writers=writers, dry_run=dry_run)

    def acl_names(self, obj: DigitalObject) -> Dict[str, List[str]]:
        """Return an object's ACL as names; see :func:`dobject.acls.acl_names`."""
        return acl_names(obj)

    def delete_object(
        self, obj: Union[DigitalObject, HandleLike], json_pointer: Optional[str] = None
    ) -> bool:
        """Delete an object or a subtree; see :func:`dobject.objects.delete_object`."""
        if isinstance(obj, str):
            obj = Handle(obj, self.connection)
        return objects.delete_object(obj, json_pointer=json_pointer)

    def read_payload(self, obj: Union[DigitalObject, HandleLike], name: str) -> bytes:
        """Download a payload; see :func:`dobject.objects.read_payload`."""
        if isinstance(obj, str):
            obj = Handle(obj, self.connection)
        return objects.read_payload(obj, name)

    def export_payload(
        self, obj: DigitalObject, name: str, filename: Optional[str] = None
    ) -> str:
        """Write a payload to a file; see :func:`dobject.objects.export_payload`."""
        return objects.export_payload(obj, name, filename)

    def delete_payload(self, obj: DigitalObject, name: str) -> DigitalObject:
        """Remove a payload; see :func:`dobject.objects.delete_payload`."""
        return objects.delete_payload(obj, name)

    def query(
        self,
        q: str,
        page_num: int = 0,
        page_size: int = 10,
        sort_fields: SortFields = None,
        json_filter: Union[None, str, Sequence[str]] = None,
    ) -> List[DigitalObject]:
        """Search objects; see :func:`dobject.query.query`."""
        return query(
            self.connection,
            q,
            page_num=page_num,
            page_size=page_size,
            sort_fields=sort_fields,
            json_filter=json_filter,
        )

    def query_ids(
        self,
        q: str,
        page_num: int = 0,
        page_size: int = 10,
        sort_fields: SortFields = None,
    ) -> List[Handle]:
        """Search object handles; see :func:`dobject.query.query_ids`."""
        return query_ids(
            self.connection, q, page_num=page_num, page_size=page_size, sort_fields=sort_fields
        )

    def count(self, q: str) -> int:
        """Count matching objects; see :func:`dobject.query.count`."""
        return count(self.connection, q)

    def create_schema(self, name: Optional[str], definition: SchemaSource) -> bool:
        """Register a schema; see :func:`dobject.schema.create_schema`."""
        return create_schema(self.connection, name, definition)

    def update_schema(self, name: Optional[str], definition: SchemaSource) -> bool:
        """Replace a schema; see :func:`dobject.schema.update_schema`."""
        return update_schema(self.connection, name, definition)

    def get_schema(self, name: str) -> Dict[str, Any]:
        """Read a schema; see :func:`dobject.schema.get_schema`."""
        return get_schema(self.connection, name)

    def read_token(self) -> TokenInfo:
        """Introspect the token; see :meth:`Connection.read_token`."""
        return self.connection.read_token()

    def close(self) -> bool:
        """Revoke the token and close the connection."""
        return self.connection.close()

    def __enter__(self) -> "DigitalObjectClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.connection.__exit__(*args)
