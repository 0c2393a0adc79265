"""Handles and object snapshots."""

import copy
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from dobject.exceptions import UsageError
from dobject.models import AccessControlList, ObjectMetadata, PayloadInfo

if TYPE_CHECKING:
    from dobject.connection import Connection


class Handle:
    """Identifier ``prefix/suffix`` of an object on a connection's server.

    The prefix must be the one the connection's server mints under.
    """

    __slots__ = ("_value", "_connection")

    def __init__(self, value: str, connection: "Connection") -> None:
        prefix, sep, suffix = value.partition("/")
        if not sep or not suffix:
            raise UsageError(f"Invalid handle {value!r}, expected prefix/suffix")
        if prefix != connection.prefix:
            raise UsageError(
                f"Handle prefix {prefix!r} does not match the connection's prefix "
                f"{connection.prefix!r}"
            )
        self._value = value
        self._connection = connection

    @property
    def value(self) -> str:
        return self._value

    @property
    def connection(self) -> "Connection":
        return self._connection

    @property
    def prefix(self) -> str:
        return self._value.partition("/")[0]

    @property
    def suffix(self) -> str:
        return self._value.partition("/")[2]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Handle):
            return NotImplemented
        return self._value == other._value and self._connection is other._connection

    def __hash__(self) -> int:
        return hash((self._value, id(self._connection)))

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Handle({self._value})"


class DigitalObject:
    """Snapshot of a digital object as last returned by the server.

    Snapshots are never changed after construction. Operations that modify
    the object return a new snapshot and leave this one stale, so write::

        obj = update_object(obj, content=...)
    """

    __slots__ = ("_record", "_handle")

    def __init__(self, record: Dict[str, Any], connection: "Connection") -> None:
        """Initialize from a full server record.

        Args:
            record: ``{"id", "type", "content", "metadata", "acl", "payloads"}``
            connection: Connection the record was read through
        """
        if "id" not in record:
            raise UsageError("Object record has no id")
        self._record = copy.deepcopy(record)
        self._handle = Handle(record["id"], connection)

    @property
    def handle(self) -> Handle:
        return self._handle

    @property
    def id(self) -> str:
        return self._handle.value

    @property
    def connection(self) -> "Connection":
        return self._handle.connection

    @property
    def content(self) -> Any:
        """The object's JSON content (a copy)."""
        return copy.deepcopy(self._record.get("content"))

    @property
    def type_name(self) -> Optional[str]:
        return self._record.get("type")

    @property
    def metadata(self) -> ObjectMetadata:
        return ObjectMetadata.model_validate(self._record.get("metadata") or {})

    @property
    def payloads(self) -> List[PayloadInfo]:
        return [PayloadInfo.model_validate(p) for p in self._record.get("payloads") or []]

    @property
    def payload_names(self) -> List[str]:
        return [p.name for p in self.payloads]

    @property
    def acl(self) -> AccessControlList:
        """Reader and writer principal IDs; see ``acls.acl_names`` for names."""
        return AccessControlList.model_validate(self._record.get("acl") or {})

    @property
    def record(self) -> Dict[str, Any]:
        """The full server record (a copy)."""
        return copy.deepcopy(self._record)

    def payload_info(self, name: str) -> Optional[PayloadInfo]:
        for info in self.payloads:
            if info.name == name:
                return info
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DigitalObject):
            return NotImplemented
        return self._handle == other._handle and self._record == other._record

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DigitalObject({self._handle.value})"
