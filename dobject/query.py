"""Search operations.

Query strings are passed to the server untouched. They use its field-path
and boolean grammar, for example::

    query(conn, "/name:Zippy")                 # a JSON leaf "name" equal to "Zippy"
    query(conn, "/name:Zip*")                  # wildcards
    query(conn, "/x1:[0.0 TO 0.2]")            # numeric ranges
    query(conn, "(/name:Zip* OR /name:Reg*) AND /x1:[0.0 TO 0.8]")
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from dobject.connection import Connection
from dobject.entity import DigitalObject, Handle
from dobject.models import SearchResponse
from dobject.rest_client import encode_json_filter, encode_sort_fields, validate_page_size

SortFields = Union[None, str, Sequence[Union[str, Tuple[str, str]]]]


def _search(conn: Connection, params: Dict[str, Any]) -> SearchResponse:
    return SearchResponse.model_validate(conn.request("GET", "objects/", params=params))


def query(
    conn: Connection,
    query: str,
    page_num: int = 0,
    page_size: int = 10,
    sort_fields: SortFields = None,
    json_filter: Union[None, str, Sequence[str]] = None,
) -> List[DigitalObject]:
    """Find objects matching a query.

    Args:
        conn: Connection
        query: Query string
        page_num: Zero-based page number
        page_size: Results per page; negative means no limit, 0 is rejected
        sort_fields: Field names or ``(field, "ASC"|"DESC")`` pairs
        json_filter: JSON pointers restricting the returned content

    Returns:
        Objects in the order the server returned them

    Raises:
        UsageError: If ``page_size`` is 0
    """
    validate_page_size(page_size)
    response = _search(
        conn,
        {
            "query": query,
            "full": True,
            "pageNum": page_num,
            "pageSize": page_size,
            "filter": encode_json_filter(json_filter),
            "sortFields": encode_sort_fields(sort_fields),
        },
    )
    return [DigitalObject(r, conn) for r in response.results]


def query_ids(
    conn: Connection,
    query: str,
    page_num: int = 0,
    page_size: int = 10,
    sort_fields: SortFields = None,
) -> List[Handle]:
    """Find the handles of objects matching a query.

    Same arguments as :func:`query`.
    """
    return [Handle(r, conn) for r in search_ids(conn, query, page_num, page_size, sort_fields)]


def search_ids(
    conn: Connection,
    query: str,
    page_num: int = 0,
    page_size: int = 10,
    sort_fields: SortFields = None,
) -> List[str]:
    """Like :func:`query_ids` but returns the raw identifier strings.

    Identifiers outside the connection's prefix, such as those of
    principals, are returned as well.
    """
    validate_page_size(page_size)
    response = _search(
        conn,
        {
            "query": query,
            "ids": True,
            "pageNum": page_num,
            "pageSize": page_size,
            "sortFields": encode_sort_fields(sort_fields),
        },
    )
    return [str(r) for r in response.results]


def count(conn: Connection, query: str) -> int:
    """Return the number of objects matching a query, ignoring pagination."""
    return _search(conn, {"query": query, "pageSize": 0}).size


def quote(value: str) -> str:
    """Quote a term for use in a query string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
