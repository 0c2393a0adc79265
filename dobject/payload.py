"""Local files to attach to objects as payloads."""

import mimetypes
import os
from contextlib import ExitStack, contextmanager
from typing import Iterator, List, Optional, Sequence, Union

from dobject.exceptions import UsageError
from dobject.rest_client import MultipartPart

DEFAULT_MEDIA_TYPE = "application/octet-stream"

PathLike = Union[str, "os.PathLike[str]"]


class Payload:
    """A local file to upload under ``name``.

    The file is opened anew for every request that carries it.
    """

    __slots__ = ("name", "path", "media_type")

    def __init__(self, name: str, path: PathLike, media_type: str) -> None:
        path = os.fspath(path)
        if not os.path.isfile(path):
            raise UsageError(f"Payload {name!r}: {path} is not an existing file")
        self.name = name
        self.path = path
        self.media_type = media_type

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self) -> str:
        return f"Payload({self.name}, {self.media_type})"


def payload(path: PathLike, media_type: Optional[str] = None, name: Optional[str] = None) -> Payload:
    """Build a Payload for a local file.

    Args:
        path: File to upload
        media_type: MIME type; guessed from the file extension when None
        name: Payload name on the server; defaults to the file's base name

    Returns:
        Payload
    """
    path = os.fspath(path)
    if media_type is None:
        media_type = mimetypes.guess_type(path)[0] or DEFAULT_MEDIA_TYPE
    return Payload(name or os.path.basename(path), path, media_type)


def as_list(payloads: Union[None, Payload, Sequence[Payload]]) -> List[Payload]:
    if payloads is None:
        return []
    if isinstance(payloads, Payload):
        return [payloads]
    return list(payloads)


@contextmanager
def open_parts(payloads: Sequence[Payload]) -> Iterator[List[MultipartPart]]:
    """Open each payload's file and yield its multipart sections.

    Every file is closed on exit, whether or not the request succeeded.
    """
    with ExitStack() as stack:
        parts: List[MultipartPart] = []
        for p in payloads:
            f = stack.enter_context(open(p.path, "rb"))
            parts.append((p.name, (p.filename, f, p.media_type)))
        yield parts
