"""Shared fixtures for unit tests."""

from typing import Any, Callable, Dict, Optional
from urllib.parse import parse_qs, urlsplit

import pytest

from dobject.connection import Connection

HOST = "https://localhost:8443"
PREFIX = "test"
ALICE_ID = "test/alice-id"


@pytest.fixture
def host() -> str:
    return HOST


@pytest.fixture
def conn() -> Connection:
    """Authenticated connection as alice, built without a login round trip."""
    return Connection(HOST, PREFIX, username="alice", token="tok-123")


@pytest.fixture
def anonymous_conn() -> Connection:
    return Connection(HOST, PREFIX)


@pytest.fixture
def make_record() -> Callable[..., Dict[str, Any]]:
    """Build a full object record as the server returns it."""

    def _make(
        id: str = "test/abc",
        content: Optional[Dict[str, Any]] = None,
        type: str = "Document",
        acl: Optional[Dict[str, Any]] = None,
        payloads: Optional[list] = None,
    ) -> Dict[str, Any]:
        body = dict(content if content is not None else {"name": "item1", "description": "x"})
        body["id"] = id
        record: Dict[str, Any] = {
            "id": id,
            "type": type,
            "content": body,
            "acl": acl if acl is not None else {"readers": [ALICE_ID], "writers": [ALICE_ID]},
            "metadata": {
                "createdOn": 1656157509090,
                "createdBy": ALICE_ID,
                "modifiedOn": 1656157509090,
                "modifiedBy": ALICE_ID,
                "txnId": 1656157509093001,
            },
        }
        if payloads is not None:
            record["payloads"] = payloads
        return record

    return _make


@pytest.fixture
def params_of() -> Callable[[Any], Dict[str, str]]:
    """Return the query parameters of a recorded request as a flat dict."""

    def _params(call: Any) -> Dict[str, str]:
        parsed = parse_qs(urlsplit(call.request.url).query, keep_blank_values=True)
        return {key: values[-1] for key, values in parsed.items()}

    return _params


def search_body(results: list, size: Optional[int] = None) -> Dict[str, Any]:
    return {"pageNum": 0, "pageSize": 10, "size": len(results) if size is None else size, "results": results}


@pytest.fixture
def search() -> Callable[..., Dict[str, Any]]:
    """Build a search response body."""
    return search_body
