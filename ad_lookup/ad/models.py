from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ldap3.utils.ciDict import CaseInsensitiveDict

from ..exceptions import InvalidArgumentError

# LDAPS on a domain controller and on a global catalog.
SSL_PORTS = (636, 3269)


@dataclass(frozen=True)
class ADHost:
    """Directory server address.

    Standard ports are 389 / 636 (LDAPS) for a domain controller and
    3268 / 3269 (LDAPS) for the global catalog.
    """

    host: str
    port: int

    def __post_init__(self) -> None:
        host = (self.host or "").strip()
        if not host:
            raise InvalidArgumentError("host")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or self.port <= 0:
            raise InvalidArgumentError("port")
        object.__setattr__(self, "host", host)

    @property
    def is_ssl_port(self) -> bool:
        return self.port in SSL_PORTS

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class DirectoryEntry:
    dn: str
    attributes: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    def values(self, name: str) -> list[str]:
        return list(self.attributes.get(name) or [])


@dataclass
class UserProfile:
    user_name: str
    company_name: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    group_names: set[str] = field(default_factory=set)
