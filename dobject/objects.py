"""Create, read, update and delete digital objects and their payloads."""

import copy
import io
import logging
import os
import re
import tempfile
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

from dobject.acls import default_acl, resolve_acls
from dobject.connection import Connection
from dobject.entity import DigitalObject, Handle
from dobject.exceptions import DigitalObjectError, UsageError
from dobject.models import AccessControlList
from dobject.payload import Payload, as_list, open_parts
from dobject.rest_client import encode_json_filter, json_part

logger = logging.getLogger(__name__)

T = TypeVar("T")

Payloads = Union[None, Payload, Sequence[Payload]]
HandleLike = Union[str, Handle]

# update_object's default content: resend the snapshot's
UNCHANGED: Any = object()


def _pointer_segments(json_pointer: str) -> List[str]:
    """Split a JSON pointer into unescaped reference tokens.

    Raises:
        UsageError: If the pointer is neither empty nor starts with ``/``
    """
    if json_pointer == "":
        return []
    if not json_pointer.startswith("/"):
        raise UsageError(f"Invalid json_pointer {json_pointer!r}")
    return [s.replace("~1", "/").replace("~0", "~") for s in json_pointer[1:].split("/")]


def _with_subtree(record: Dict[str, Any], json_pointer: str, value: Any) -> Dict[str, Any]:
    """Return a copy of ``record`` with ``value`` placed at ``json_pointer`` in its content."""
    merged = copy.deepcopy(record)
    segments = _pointer_segments(json_pointer)
    if not segments:
        merged["content"] = value
        return merged
    parent = merged["content"]
    for segment in segments[:-1]:
        parent = parent[int(segment)] if isinstance(parent, list) else parent[segment]
    last = segments[-1]
    if isinstance(parent, list):
        if last == "-":
            parent.append(value)
        else:
            parent[int(last)] = value
    else:
        parent[last] = value
    return merged


def _no_whitespace(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return re.sub(r"\s", "_", value)


def _handle(conn: Connection, handle: HandleLike) -> Handle:
    if isinstance(handle, Handle):
        return handle
    return Handle(handle, conn)


def _object_path(handle: Handle) -> str:
    return f"objects/{handle.value}"


def _acl_from_names(conn: Connection, acl: Mapping[str, Sequence[str]]) -> AccessControlList:
    unknown = set(acl) - {"readers", "writers"}
    if unknown:
        raise UsageError(f"Unknown ACL keys: {', '.join(sorted(unknown))}")
    return resolve_acls(conn, readers=acl.get("readers", ()), writers=acl.get("writers", ()))


def create_object(
    conn: Connection,
    content: Any,
    type_name: str,
    handle: Optional[str] = None,
    suffix: Optional[str] = None,
    dry_run: bool = False,
    payloads: Payloads = None,
    acl: Optional[Mapping[str, Sequence[str]]] = None,
) -> DigitalObject:
    """Create a digital object.

    Args:
        conn: Connection
        content: JSON content, validated by the server against ``type_name``
        type_name: Name of the schema the content follows
        handle: Full identifier ``prefix/suffix`` to use instead of a minted one
        suffix: Suffix to append to the connection's prefix
        dry_run: Validate and echo the object without storing it
        payloads: Files to attach
        acl: ``{"readers": [...], "writers": [...]}`` of User or Group names;
            defaults to the logged-in user only

    Returns:
        DigitalObject

    Raises:
        UsageError: If ``handle`` has another prefix
        ValidationError: If the server rejects the content
        ConflictError: If the handle already exists

    Example:
        obj = create_object(
            conn,
            {"name": "item1", "description": "x"},
            "Document",
            acl={"readers": ["alice", "bob"], "writers": ["alice"]},
            payloads=[payload("data/trial.svg", "image/svg+xml")],
        )
    """
    if handle is not None:
        Handle(handle, conn)
    params: Dict[str, Any] = {
        "type": type_name,
        "handle": _no_whitespace(handle),
        "suffix": _no_whitespace(suffix),
        "dryRun": dry_run or None,
        "full": True,
    }
    resolved = default_acl(conn) if acl is None else _acl_from_names(conn, acl)
    files = as_list(payloads)

    if resolved is None and not files:
        record = conn.request("POST", "objects", params=params, json_body=content)
    else:
        with open_parts(files) as parts:
            body = [json_part("content", content)]
            if resolved is not None:
                body.append(json_part("acl", resolved.to_wire()))
            record = conn.request("POST", "objects", params=params, files=body + parts)
    obj = DigitalObject(record, conn)
    logger.debug("Created %s%s", obj.id, " (dry run)" if dry_run else "")
    return obj


def get_object(conn: Connection, handle: HandleLike) -> DigitalObject:
    """Read an object with its metadata, ACL and payload descriptors.

    Raises:
        NotFoundError: If the object does not exist or may not be read
    """
    h = _handle(conn, handle)
    record = conn.request("GET", _object_path(h), params={"full": True})
    return DigitalObject(record, conn)


def read_object(
    conn: Connection,
    handle: HandleLike,
    json_pointer: Optional[str] = None,
    json_filter: Union[None, str, Sequence[str]] = None,
) -> Any:
    """Read part of an object's content.

    Args:
        conn: Connection
        handle: Object identifier
        json_pointer: Subtree to return, e.g. ``/description``
        json_filter: JSON pointers of the fields to keep

    Returns:
        The decoded JSON value
    """
    h = _handle(conn, handle)
    params = {"jsonPointer": json_pointer, "jsonFilter": encode_json_filter(json_filter)}
    return conn.request("GET", _object_path(h), params=params)


def update_object(
    obj: DigitalObject,
    content: Any = UNCHANGED,
    json_pointer: Optional[str] = None,
    type_name: Optional[str] = None,
    dry_run: bool = False,
    payloads: Payloads = None,
    payload_to_delete: Optional[str] = None,
) -> DigitalObject:
    """Update an object and return the new snapshot.

    Three shapes are sent: with ``json_pointer`` only the subtree is replaced
    by ``content``; with ``payloads`` the full content (``content`` or the
    snapshot's) is resent alongside the files; otherwise the full content is
    sent as JSON. ``obj`` is stale afterward.

    When the server answers a pointer update with the subtree alone, the
    object is read back. For a dry run nothing was stored, so the subtree is
    placed into a copy of ``obj`` instead.

    Args:
        obj: Snapshot of the object to update
        content: New content, or the new subtree value with ``json_pointer``;
            ``None`` is sent as JSON ``null``
        json_pointer: Subtree to replace
        type_name: New schema name
        dry_run: Validate and echo without storing
        payloads: Files to add or replace
        payload_to_delete: Name of a payload to remove

    Returns:
        DigitalObject

    Raises:
        UsageError: If ``json_pointer`` is combined with ``payloads`` or given
            without ``content``
    """
    files = as_list(payloads)
    if json_pointer is not None and files:
        raise UsageError("Cannot specify json_pointer and payloads")
    if json_pointer is not None and content is UNCHANGED:
        raise UsageError("content is required with json_pointer")

    conn = obj.connection
    path = _object_path(obj.handle)
    params: Dict[str, Any] = {
        "type": type_name,
        "dryRun": dry_run or None,
        "jsonPointer": json_pointer,
        "payloadToDelete": payload_to_delete,
        "full": True,
    }
    body = obj.content if content is UNCHANGED else content

    if files:
        with open_parts(files) as parts:
            record = conn.request(
                "PUT", path, params=params, files=[json_part("content", body)] + parts
            )
    elif body is None:
        record = conn.request("PUT", path, params=params, json_text="null")
    else:
        record = conn.request("PUT", path, params=params, json_body=body)

    if json_pointer is not None and not (isinstance(record, dict) and "id" in record):
        # the server answered with the subtree only
        if dry_run:
            return DigitalObject(_with_subtree(obj.record, json_pointer, record), conn)
        return get_object(conn, obj.handle)
    return DigitalObject(record, conn)


def update_acls(
    obj: DigitalObject,
    readers: Sequence[str] = (),
    writers: Sequence[str] = (),
    dry_run: bool = False,
) -> DigitalObject:
    """Replace an object's ACL and return the new snapshot.

    The lists replace the current ones wholesale; to add a reader, pass the
    existing readers plus the new one.

    Args:
        obj: Snapshot of the object
        readers: User or Group names allowed to read
        writers: User or Group names allowed to write
        dry_run: Validate and echo without storing

    Returns:
        DigitalObject
    """
    conn = obj.connection
    resolved = resolve_acls(conn, readers=readers, writers=writers)
    params = {"dryRun": dry_run or None, "full": True}
    record = conn.request(
        "PUT",
        _object_path(obj.handle),
        params=params,
        files=[json_part("content", obj.content), json_part("acl", resolved.to_wire())],
    )
    return DigitalObject(record, conn)


def delete_object(
    obj: Union[DigitalObject, Handle],
    json_pointer: Optional[str] = None,
) -> bool:
    """Delete an object, or only the subtree at ``json_pointer``.

    Given a snapshot, the pointer's top-level key must be in its content.
    The server has the final word either way.

    Returns:
        True

    Raises:
        UsageError: If the pointer's key is not in the snapshot's content
        DigitalObjectError: If the server answers with a non-empty body
    """
    handle = obj.handle if isinstance(obj, DigitalObject) else obj
    if json_pointer is not None and isinstance(obj, DigitalObject):
        segments = _pointer_segments(json_pointer)
        content = obj.content
        if not segments or not isinstance(content, dict) or segments[0] not in content:
            raise UsageError(f"Invalid json_pointer {json_pointer!r} for {obj.id}")

    result = handle.connection.request(
        "DELETE", _object_path(handle), params={"jsonPointer": json_pointer}
    )
    if result:
        target = handle.value if json_pointer is None else f"{json_pointer} from {handle.value}"
        raise DigitalObjectError(f"There was an error deleting {target}: {result!r}")
    return True


def read_payload(obj: Union[DigitalObject, Handle], name: str) -> bytes:
    """Download a payload.

    Raises:
        UsageError: If the snapshot has no payload called ``name``
        NotFoundError: If the server has no such payload
    """
    if isinstance(obj, DigitalObject):
        if name not in obj.payload_names:
            raise UsageError(f"{obj} has no payload named {name!r}")
        handle = obj.handle
    else:
        handle = obj
    return handle.connection.request(
        "GET", _object_path(handle), params={"payload": name}, raw=True
    )


def export_payload(obj: DigitalObject, name: str, filename: Optional[str] = None) -> str:
    """Write a payload to a file.

    Args:
        obj: Snapshot of the object
        name: Payload name
        filename: Target file; defaults to the stored file name in a new
            temporary directory

    Returns:
        Path of the written file
    """
    info = obj.payload_info(name)
    if info is None:
        raise UsageError(f"{obj} does not contain a payload with name {name!r}")
    if filename is None:
        filename = os.path.join(tempfile.mkdtemp(), info.filename or name)
    data = read_payload(obj, name)
    with open(filename, "wb") as f:
        f.write(data)
    return filename


def process_payload(fn: Callable[[io.BytesIO], T], obj: DigitalObject, name: str) -> T:
    """Call ``fn`` with a binary stream over a payload and return its result."""
    with io.BytesIO(read_payload(obj, name)) as stream:
        return fn(stream)


def delete_payload(obj: DigitalObject, name: str) -> DigitalObject:
    """Remove a payload and return the new snapshot.

    Raises:
        UsageError: If the snapshot has no payload called ``name``
    """
    if name not in obj.payload_names:
        raise UsageError(f"Invalid payload name {name!r} for {obj.id}")
    return update_object(obj, payload_to_delete=name)
