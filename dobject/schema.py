"""Registration of the JSON schemas the server validates content against."""

import json
import os
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from dobject.connection import Connection
from dobject.exceptions import UsageError
from dobject.query import count, quote

SchemaSource = Union[Mapping[str, Any], str, "os.PathLike[str]"]


def _load(name: Optional[str], schema: SchemaSource) -> Tuple[str, Mapping[str, Any]]:
    if isinstance(schema, Mapping):
        if name is None:
            raise UsageError("A schema name is required when the schema is not a file")
        return name, schema
    path = os.fspath(schema)
    if not os.path.isfile(path):
        raise UsageError(f"{path} is not an existing schema file")
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)
    if name is None:
        name = os.path.basename(path).split(".")[0]
    return name, document


def schema_count(conn: Connection, name: str) -> int:
    """Number of registered schemas called ``name`` (0 or 1)."""
    return count(conn, f'type:"Schema" AND /name:{quote(name)}')


def _put(conn: Connection, name: str, schema: Mapping[str, Any]) -> bool:
    conn.request("PUT", f"schemas/{name}", json_body=dict(schema))
    return True


def create_schema(conn: Connection, name: Optional[str], schema: SchemaSource) -> bool:
    """Register a new schema.

    ``schema`` is a mapping or the path of a JSON file. With a file the name
    may be left out, the file's stem is then used::

        create_schema(conn, "Document", {"type": "object", ...})
        create_schema(conn, None, "schemas/Document.json")

    Returns:
        True

    Raises:
        UsageError: If a schema with this name already exists
    """
    name, document = _load(name, schema)
    if schema_count(conn, name) != 0:
        raise UsageError(f"Schema {name} already exists, use update_schema instead")
    return _put(conn, name, document)


def update_schema(conn: Connection, name: Optional[str], schema: SchemaSource) -> bool:
    """Replace the definition of a registered schema.

    Returns:
        True

    Raises:
        UsageError: If no schema with this name exists
    """
    name, document = _load(name, schema)
    if schema_count(conn, name) == 0:
        raise UsageError(f"Schema {name} does not exist, use create_schema instead")
    return _put(conn, name, document)


def get_schema(conn: Connection, name: str) -> Dict[str, Any]:
    """Return a registered schema's definition."""
    return conn.request("GET", f"schemas/{name}")
