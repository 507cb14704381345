from __future__ import annotations

import logging
import ssl
from typing import Any, Iterator, Optional, Protocol, Sequence

from ldap3 import Server, Connection, NONE, SIMPLE, SUBTREE, Tls
from ldap3.core.exceptions import LDAPException, LDAPOperationResult
from ldap3.core.results import RESULT_SUCCESS
from ldap3.utils.ciDict import CaseInsensitiveDict

from .models import ADHost, DirectoryEntry
from .utils import to_str_list

log = logging.getLogger(__name__)


class DirectoryClient(Protocol):
    """Primitives the lookup needs from a directory protocol library."""

    def connect(self, host: ADHost) -> Any: ...

    def is_connected(self, conn: Any) -> bool: ...

    def bind(self, conn: Any, principal: str, password: str) -> bool: ...

    def is_bound(self, conn: Any) -> bool: ...

    def search(
        self,
        conn: Any,
        base_dn: str,
        search_filter: str,
        attributes: Sequence[str],
    ) -> Iterator[DirectoryEntry]: ...

    def close(self, conn: Any) -> None: ...


class LdapDirectoryClient:
    """DirectoryClient backed by ldap3 (synchronous strategy).

    All methods let ldap3's LDAPException subclasses propagate; wrapping them
    with context is the caller's job.
    """

    def __init__(
        self,
        use_ssl: Optional[bool] = None,
        tls_validate: bool = False,
        connect_timeout: Optional[float] = None,
    ) -> None:
        # None: decide by port (636 / 3269 are LDAPS).
        self.use_ssl = use_ssl
        self.tls_validate = tls_validate
        self.connect_timeout = connect_timeout

    def _server(self, host: ADHost) -> Server:
        use_ssl = host.is_ssl_port if self.use_ssl is None else bool(self.use_ssl)
        tls = Tls(validate=ssl.CERT_REQUIRED if self.tls_validate else ssl.CERT_NONE)
        return Server(
            host=host.host,
            port=host.port,
            use_ssl=use_ssl,
            get_info=NONE,
            tls=tls,
            connect_timeout=self.connect_timeout,
        )

    def connect(self, host: ADHost) -> Connection:
        conn = Connection(self._server(host), auto_bind=False, auto_referrals=True)
        try:
            conn.open()
        except LDAPException:
            try:
                conn.unbind()
            except LDAPException:
                pass
            raise
        return conn

    def is_connected(self, conn: Connection) -> bool:
        return not conn.closed

    def bind(self, conn: Connection, principal: str, password: str) -> bool:
        conn.user = principal
        conn.password = password
        conn.authentication = SIMPLE
        return bool(conn.bind())

    def is_bound(self, conn: Connection) -> bool:
        return bool(conn.bound)

    def search(
        self,
        conn: Connection,
        base_dn: str,
        search_filter: str,
        attributes: Sequence[str],
    ) -> Iterator[DirectoryEntry]:
        found = conn.search(
            search_base=base_dn,
            search_filter=search_filter,
            search_scope=SUBTREE,
            attributes=list(attributes),
            types_only=False,
        )
        if not found:
            # ldap3 returns False for an empty result too; only a non-success code is an error.
            res = dict(conn.result or {})
            code = res.get("result", RESULT_SUCCESS)
            if code != RESULT_SUCCESS:
                raise LDAPOperationResult(
                    result=code,
                    description=res.get("description"),
                    dn=res.get("dn"),
                    message=res.get("message"),
                    response_type=res.get("type"),
                )
            log.debug("Search returned no entries: base=%s filter=%s", base_dn, search_filter)
        return _iter_entries(conn.response or [])

    def close(self, conn: Connection) -> None:
        conn.unbind()


def _iter_entries(response: list[dict]) -> Iterator[DirectoryEntry]:
    for item in response:
        # Skip referral continuations (searchResRef).
        if item.get("type") != "searchResEntry":
            continue
        attrs = CaseInsensitiveDict()
        for name, value in (item.get("attributes") or {}).items():
            attrs[name] = to_str_list(value)
        yield DirectoryEntry(dn=str(item.get("dn") or ""), attributes=attrs)
