"""REST client implementation for dobject."""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import requests

from dobject.exceptions import (
    AuthenticationError,
    ConflictError,
    ConnectionError,
    DigitalObjectError,
    NotFoundError,
    PermissionError,
    ServerError,
    TimeoutError,
    UsageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# (field name, (file name, data, media type)) as accepted by requests' ``files=``
MultipartPart = Tuple[str, Tuple[Optional[str], Any, str]]


def encode_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """Encode query parameters the way the server parses them.

    ``None`` values are dropped, booleans become ``true``/``false``, lists
    are joined with commas.

    Args:
        params: Raw parameter values

    Returns:
        Parameters as strings
    """
    encoded: Dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            encoded[key] = ",".join(str(v) for v in value)
        else:
            encoded[key] = str(value)
    return encoded


def encode_sort_fields(
    sort_fields: Union[None, str, Sequence[Union[str, Tuple[str, str]]]]
) -> Optional[str]:
    """Encode sort fields as ``field [ASC|DESC],...``.

    Args:
        sort_fields: A ready string, or a list of field names or
            ``(field, direction)`` pairs

    Returns:
        Encoded value or None
    """
    if sort_fields is None or isinstance(sort_fields, str):
        return sort_fields
    specs = []
    for field in sort_fields:
        if isinstance(field, tuple):
            specs.append(f"{field[0]} {field[1].upper()}")
        else:
            specs.append(field)
    return ",".join(specs)


def encode_json_filter(json_filter: Union[None, str, Sequence[str]]) -> Optional[str]:
    """Encode a JSON filter (a list of JSON pointers) as JSON text."""
    if json_filter is None or isinstance(json_filter, str):
        return json_filter
    return json.dumps(list(json_filter))


def validate_page_size(page_size: int) -> None:
    """Reject a page size of 0, which the server reserves for count-only searches.

    Raises:
        UsageError: If ``page_size`` is 0
    """
    if page_size == 0:
        raise UsageError("Invalid page_size 0, use count() instead")


def json_part(name: str, value: Any) -> MultipartPart:
    """Build a multipart section holding ``value`` as JSON text."""
    return (name, (None, json.dumps(value), "application/json"))


class RestClient:
    """REST client for a digital object server."""

    def __init__(
        self,
        base_url: str,
        verify: bool = True,
        timeout: Optional[float] = 30,
    ) -> None:
        """Initialize REST client.

        Args:
            base_url: Base URL of the server
            verify: Whether to verify TLS certificates
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.verify = verify
        self.timeout = timeout
        self.session = requests.Session()

    def _url(self, path: str) -> str:
        """Construct full URL from path.

        Args:
            path: API path

        Returns:
            Full URL
        """
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _error_body(response: requests.Response) -> Tuple[Optional[Any], str]:
        try:
            body = response.json()
        except ValueError:
            return None, response.text
        if isinstance(body, dict):
            return body, str(body.get("message", ""))
        return body, response.text

    def _handle_error(self, response: requests.Response) -> None:
        """Handle HTTP error responses.

        Args:
            response: HTTP response

        Raises:
            DigitalObjectError: For various error conditions
        """
        status = response.status_code
        body, server_message = self._error_body(response)
        message = f"HTTP {status} {response.reason or ''}".rstrip()
        if server_message:
            message = f"{message}: {server_message}"

        if status == 400:
            raise ValidationError(message, details=body)
        elif status == 401:
            raise AuthenticationError(message)
        elif status == 403:
            raise PermissionError(message)
        elif status == 404:
            raise NotFoundError(message)
        elif status == 409:
            raise ConflictError(message)
        elif status >= 500:
            raise ServerError(message, status_code=status)
        else:
            raise DigitalObjectError(message, status_code=status)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        content_type = response.headers.get("Content-Type", "")
        if "json" in content_type:
            return response.json()
        return response.content

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        json_text: Optional[str] = None,
        files: Optional[List[MultipartPart]] = None,
        headers: Optional[Dict[str, str]] = None,
        raw: bool = False,
    ) -> Any:
        """Send a request and decode the response.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            params: Query parameters, encoded by :func:`encode_params`
            json_body: Value sent as a JSON body
            json_text: JSON document sent as is, for bodies such as ``null``
            files: Multipart sections; when given the body is multipart
            headers: Extra headers
            raw: Return the body bytes whatever the content type

        Returns:
            Decoded JSON, raw bytes for non-JSON bodies or when ``raw`` is
            set, or None for an empty body

        Raises:
            DigitalObjectError: On failure
        """
        url = self._url(path)
        kwargs: Dict[str, Any] = {
            "params": encode_params(params or {}),
            "headers": headers or {},
            "verify": self.verify,
            "timeout": self.timeout,
        }
        if files is not None:
            kwargs["files"] = files
        elif json_text is not None:
            kwargs["data"] = json_text
            kwargs["headers"] = {**kwargs["headers"], "Content-Type": "application/json"}
        elif json_body is not None:
            kwargs["json"] = json_body

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout:
            raise TimeoutError("Request timed out")
        except requests.exceptions.ConnectionError as e:
            raise ConnectionError(f"Connection failed: {str(e)}")

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code >= 400:
            self._handle_error(response)
        if raw:
            return response.content
        return self._decode(response)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
