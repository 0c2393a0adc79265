"""Authenticated connection to a digital object server."""

import getpass
import logging
import os
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from dobject.exceptions import AuthenticationError, DigitalObjectError
from dobject.models import ConnectionConfig, TokenInfo
from dobject.rest_client import MultipartPart, RestClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Connection:
    """A live, optionally authenticated link to one server instance.

    A connection holds the bearer token, the handle prefix the instance
    mints identifiers under, and the caches used to resolve reader/writer
    names to principal IDs. The caches are plain dicts, so a connection must
    only be used from one thread at a time.

    Example:
        with Connection.login("https://localhost:8443", "alice", "secret") as conn:
            obj = create_object(conn, {"name": "item1"}, "Document")
    """

    def __init__(
        self,
        host: str,
        prefix: str,
        username: Optional[str] = None,
        token: Optional[str] = None,
        verify: bool = True,
        timeout: Optional[float] = 30,
        strict_acls: bool = True,
        rest: Optional[RestClient] = None,
        user_id: Optional[str] = None,
    ) -> None:
        """Initialize a connection from already known state.

        Most callers want :meth:`login`, :meth:`anonymous` or
        :meth:`from_config` instead.

        Args:
            host: Base URL of the server
            prefix: Handle prefix owned by the server instance
            username: Authenticated principal name, None when anonymous
            token: Bearer token, None when anonymous
            verify: Whether to verify TLS certificates
            timeout: Request timeout in seconds
            strict_acls: Raise on unknown reader/writer names instead of
                dropping them with a warning
            rest: REST client to reuse
            user_id: Principal ID of ``username``, as returned at login
        """
        self.host = host.rstrip("/")
        self.prefix = prefix
        self.username = username
        self.token = token
        self.verify = verify
        self.timeout = timeout
        self.strict_acls = strict_acls
        self.rest = rest or RestClient(self.host, verify=verify, timeout=timeout)
        self.name_to_id: Dict[str, str] = {}
        self.id_to_name: Dict[str, str] = {}
        self.user_id = user_id
        if username is not None and user_id is not None:
            self.name_to_id[username] = user_id
            self.id_to_name[user_id] = username

    @staticmethod
    def _read_prefix(rest: RestClient) -> str:
        design = rest.request("GET", "design")
        return design["handleMintingConfig"]["prefix"]

    @classmethod
    def login(
        cls,
        host: str,
        username: str,
        password: Optional[str] = None,
        verify: bool = True,
        timeout: Optional[float] = 30,
        strict_acls: bool = True,
    ) -> "Connection":
        """Authenticate with a password and open a connection.

        Args:
            host: Base URL of the server
            username: Principal to log in as
            password: Password; prompted for on the terminal when None
            verify: Whether to verify TLS certificates
            timeout: Request timeout in seconds
            strict_acls: See :class:`Connection`

        Returns:
            Connection

        Raises:
            AuthenticationError: If the credentials are rejected
            ConnectionError: If the host cannot be reached
        """
        if password is None:
            password = getpass.getpass("Password: ")
        rest = RestClient(host, verify=verify, timeout=timeout)
        try:
            grant = rest.request(
                "POST",
                "auth/token",
                params={"full": True},
                json_body={"grant_type": "password", "username": username, "password": password},
            )
        except AuthenticationError:
            raise
        except DigitalObjectError as e:
            if e.status_code is None or e.status_code >= 500:
                raise
            raise AuthenticationError(e.message, status_code=e.status_code) from e

        conn = cls(
            host,
            "",
            username=grant.get("username", username),
            token=grant["access_token"],
            verify=verify,
            timeout=timeout,
            strict_acls=strict_acls,
            rest=rest,
            user_id=grant.get("userId"),
        )
        try:
            conn.prefix = cls._read_prefix(rest)
        except DigitalObjectError:
            conn.close()
            raise
        logger.info("Logged in to %s as %s", conn.host, conn.username)
        return conn

    @classmethod
    def anonymous(
        cls,
        host: str,
        verify: bool = True,
        timeout: Optional[float] = 30,
        strict_acls: bool = True,
    ) -> "Connection":
        """Open an unauthenticated connection.

        Only what the server's anonymous ACL allows will succeed.
        """
        rest = RestClient(host, verify=verify, timeout=timeout)
        prefix = cls._read_prefix(rest)
        return cls(
            host, prefix, verify=verify, timeout=timeout, strict_acls=strict_acls, rest=rest
        )

    @classmethod
    def from_config(
        cls,
        path: Union[str, "os.PathLike[str]"] = "config.json",
        verify: Optional[bool] = None,
        **kwargs: Any,
    ) -> "Connection":
        """Log in with the settings of a JSON config file.

        Args:
            path: Config file with ``host``, ``username`` and ``password``
            verify: Overrides the file's ``verify`` setting when given
            **kwargs: Passed to :meth:`login`

        Returns:
            Connection
        """
        config = ConnectionConfig.from_file(path)
        return cls.login(
            config.host,
            config.username,
            config.password,
            verify=config.verify if verify is None else verify,
            **kwargs,
        )

    @property
    def is_anonymous(self) -> bool:
        """True when the connection carries no token."""
        return self.token is None

    def auth_headers(self) -> Dict[str, str]:
        """Return the authorization header, empty for anonymous connections."""
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        json_text: Optional[str] = None,
        files: Optional[List[MultipartPart]] = None,
        raw: bool = False,
    ) -> Any:
        """Send an authenticated request; see :meth:`RestClient.request`."""
        return self.rest.request(
            method,
            path,
            params=params,
            json_body=json_body,
            json_text=json_text,
            files=files,
            headers=self.auth_headers(),
            raw=raw,
        )

    def read_token(self) -> TokenInfo:
        """Introspect the connection's token.

        Returns:
            TokenInfo with ``active``, ``username`` and ``user_id``
        """
        info = self.rest.request(
            "POST", "auth/introspect", params={"full": True}, json_body={"token": self.token}
        )
        return TokenInfo.model_validate(info)

    def close(self) -> bool:
        """Revoke the token server-side.

        The server may reject a second revoke; that error is raised.

        Returns:
            True
        """
        try:
            if self.token is not None:
                self.rest.request("POST", "auth/revoke", json_body={"token": self.token})
                logger.info("Revoked token for %s on %s", self.username, self.host)
        finally:
            self.rest.close()
        return True

    def __enter__(self) -> "Connection":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """Context manager exit.

        When the block raised, a failing revoke is logged and the block's
        error propagates.
        """
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except DigitalObjectError:
            logger.exception("Could not revoke token for %s on %s", self.username, self.host)

    def __repr__(self) -> str:
        if self.token is None:
            return f"Connection({self.host}/{self.prefix}, anonymous)"
        return f"Connection({self.host}/{self.prefix} as {self.username})"


def with_connection(
    body: Callable[[Connection], T],
    host: str,
    username: str,
    password: Optional[str] = None,
    verify: bool = True,
    **kwargs: Any,
) -> T:
    """Log in, run ``body`` with the connection and always revoke the token.

    Any error raised by ``body`` propagates after the token is revoked.

    Args:
        body: Function called with the open connection
        host: Base URL of the server
        username: Principal to log in as
        password: Password; prompted for when None
        verify: Whether to verify TLS certificates
        **kwargs: Passed to :meth:`Connection.login`

    Returns:
        What ``body`` returns
    """
    with Connection.login(host, username, password, verify=verify, **kwargs) as conn:
        return body(conn)
