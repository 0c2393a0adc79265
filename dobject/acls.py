"""Resolution of reader/writer names to principal IDs."""

import logging
from typing import Dict, List, Optional, Sequence

from dobject.connection import Connection
from dobject.entity import DigitalObject
from dobject.exceptions import NotFoundError, PrincipalNotFoundError
from dobject.models import AccessControlList
from dobject.query import quote, search_ids

logger = logging.getLogger(__name__)

# ACL entries the server understands without a User or Group object
RESERVED_PRINCIPALS = ("public", "authenticated")


def principal_query(name: str) -> str:
    """Query matching the User or Group called ``name``."""
    term = quote(name)
    return f"(type:User AND /username:{term}) OR (type:Group AND /groupName:{term})"


def _lookup(conn: Connection, name: str) -> Optional[str]:
    ids = search_ids(conn, principal_query(name), page_size=1)
    if not ids:
        return None
    return ids[0]


def resolve(conn: Connection, names: Sequence[str]) -> List[str]:
    """Map User or Group names to principal IDs.

    Each name is looked up at most once per connection. Unknown names raise
    unless the connection was opened with ``strict_acls=False``, in which
    case they are logged and left out.

    Args:
        conn: Connection
        names: User names or group names

    Returns:
        Principal IDs, in the order of ``names``

    Raises:
        PrincipalNotFoundError: If a name matches nothing and ``strict_acls`` is set
    """
    ids: List[str] = []
    for name in names:
        if name in RESERVED_PRINCIPALS:
            ids.append(name)
            continue
        principal_id = conn.name_to_id.get(name)
        if principal_id is None:
            principal_id = _lookup(conn, name)
            if principal_id is None:
                if conn.strict_acls:
                    raise PrincipalNotFoundError(name)
                logger.warning('There is no User or Group associated with the name "%s"', name)
                continue
            conn.name_to_id[name] = principal_id
            conn.id_to_name[principal_id] = name
        ids.append(principal_id)
    return ids


def resolve_acls(
    conn: Connection,
    readers: Sequence[str] = (),
    writers: Sequence[str] = (),
) -> AccessControlList:
    """Build an access control list from reader and writer names."""
    return AccessControlList(readers=resolve(conn, readers), writers=resolve(conn, writers))


def default_acl(conn: Connection) -> Optional[AccessControlList]:
    """The ACL of a new object: readable and writable by the logged-in user only.

    The principal ID returned at login is used as is, so built-in accounts
    without a User object (such as ``admin``) work. Without one the
    username is resolved like any other name.
    """
    if conn.username is None:
        return None
    if conn.user_id is not None:
        return AccessControlList(readers=[conn.user_id], writers=[conn.user_id])
    return resolve_acls(conn, readers=[conn.username], writers=[conn.username])


def _principal_name(conn: Connection, principal_id: str) -> str:
    name = conn.id_to_name.get(principal_id)
    if name is not None:
        return name
    if principal_id in RESERVED_PRINCIPALS:
        return principal_id
    try:
        content = conn.request("GET", f"objects/{principal_id}")
    except NotFoundError:
        return principal_id
    name = principal_id
    if isinstance(content, dict):
        name = content.get("groupName") or content.get("username") or principal_id
    conn.id_to_name[principal_id] = name
    if name != principal_id:
        conn.name_to_id.setdefault(name, principal_id)
    return name


def acl_names(obj: DigitalObject) -> Dict[str, List[str]]:
    """Return an object's ACL with principal IDs replaced by names.

    IDs not seen before are looked up on the server; an ID that cannot be
    read is kept as is.
    """
    conn = obj.connection
    return {
        key: [_principal_name(conn, principal_id) for principal_id in ids]
        for key, ids in obj.acl.to_wire().items()
    }
