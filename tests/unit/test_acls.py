"""Unit tests for ACL name resolution."""

import logging
from typing import Any, Callable, Dict

import pytest
import responses

from dobject.acls import acl_names, principal_query, resolve, resolve_acls
from dobject.connection import Connection
from dobject.entity import DigitalObject
from dobject.exceptions import PrincipalNotFoundError

HOST = "https://localhost:8443"


def add_search(results: list) -> None:
    responses.add(
        responses.GET,
        f"{HOST}/objects/",
        json={"pageNum": 0, "pageSize": 1, "size": len(results), "results": results},
    )


class TestResolve:
    """Test resolve and resolve_acls."""

    def test_principal_query(self) -> None:
        assert principal_query("alice") == (
            '(type:User AND /username:"alice") OR (type:Group AND /groupName:"alice")'
        )
        assert '"a\\"b"' in principal_query('a"b')

    @responses.activate
    def test_resolve(self, conn: Connection, params_of: Callable) -> None:
        add_search(["test/alice-id"])
        assert resolve(conn, ["alice"]) == ["test/alice-id"]
        assert conn.name_to_id == {"alice": "test/alice-id"}
        assert conn.id_to_name == {"test/alice-id": "alice"}

        params = params_of(responses.calls[0])
        assert params["query"] == principal_query("alice")
        assert params["ids"] == "true"
        assert params["pageSize"] == "1"

    @responses.activate
    def test_first_match_wins(self, conn: Connection) -> None:
        add_search(["test/first", "test/second"])
        assert resolve(conn, ["alice"]) == ["test/first"]

    @responses.activate
    def test_principal_outside_prefix(self, conn: Connection) -> None:
        add_search(["other/alice-id"])
        assert resolve(conn, ["alice"]) == ["other/alice-id"]

    @responses.activate
    def test_each_name_looked_up_once(self, conn: Connection) -> None:
        add_search(["test/alice-id"])
        resolve(conn, ["alice"])
        resolve(conn, ["alice", "alice"])
        resolve_acls(conn, readers=["alice"], writers=["alice"])
        assert len(responses.calls) == 1

    def test_lookup_count_instrumented(self, conn: Connection, mocker: Any) -> None:
        lookup = mocker.patch("dobject.acls.search_ids", return_value=["test/alice-id"])
        resolve_acls(conn, readers=["alice", "alice"], writers=["alice"])
        resolve(conn, ["alice"])
        assert lookup.call_count == 1

    def test_caches_are_per_connection(self, conn: Connection, mocker: Any) -> None:
        lookup = mocker.patch("dobject.acls.search_ids", return_value=["test/alice-id"])
        other = Connection(conn.host, conn.prefix, "bob", "tok")
        resolve(conn, ["alice"])
        resolve(other, ["alice"])
        assert lookup.call_count == 2

    @responses.activate
    def test_reserved_principals_pass_through(self, conn: Connection) -> None:
        assert resolve(conn, ["public", "authenticated"]) == ["public", "authenticated"]
        assert len(responses.calls) == 0

    @responses.activate
    def test_unknown_name_raises(self, conn: Connection) -> None:
        add_search([])
        with pytest.raises(PrincipalNotFoundError) as excinfo:
            resolve(conn, ["alcie"])
        assert excinfo.value.name == "alcie"
        assert "alcie" not in conn.name_to_id

    @responses.activate
    def test_unknown_name_dropped_when_not_strict(
        self, conn: Connection, caplog: pytest.LogCaptureFixture
    ) -> None:
        conn.strict_acls = False
        conn.name_to_id["alice"] = "test/alice-id"
        add_search([])
        with caplog.at_level(logging.WARNING, logger="dobject.acls"):
            acl = resolve_acls(conn, readers=["alice", "alcie"], writers=["alice"])
        assert acl.readers == ["test/alice-id"]
        assert acl.writers == ["test/alice-id"]
        assert 'name "alcie"' in caplog.text


class TestAclNames:
    """Test acl_names."""

    @responses.activate
    def test_uses_cache_then_server(
        self, conn: Connection, make_record: Callable[..., Dict[str, Any]]
    ) -> None:
        conn.id_to_name["test/alice-id"] = "alice"
        responses.add(
            responses.GET,
            f"{HOST}/objects/test/team-id",
            json={"id": "test/team-id", "groupName": "team", "users": []},
        )
        responses.add(
            responses.GET,
            f"{HOST}/objects/test/bob-id",
            json={"id": "test/bob-id", "username": "bob"},
        )
        obj = DigitalObject(
            make_record(
                acl={"readers": ["test/alice-id", "test/team-id", "public"], "writers": ["test/bob-id"]}
            ),
            conn,
        )

        assert acl_names(obj) == {"readers": ["alice", "team", "public"], "writers": ["bob"]}
        assert conn.name_to_id["team"] == "test/team-id"

        acl_names(obj)
        assert len(responses.calls) == 2

    @responses.activate
    def test_unreadable_principal_keeps_id(
        self, conn: Connection, make_record: Callable[..., Dict[str, Any]]
    ) -> None:
        responses.add(responses.GET, f"{HOST}/objects/test/gone", status=404)
        obj = DigitalObject(make_record(acl={"readers": ["test/gone"], "writers": []}), conn)
        assert acl_names(obj) == {"readers": ["test/gone"], "writers": []}
