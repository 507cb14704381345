from __future__ import annotations

from typing import Any, Iterator, Sequence

import pytest
from ldap3.core.exceptions import (
    LDAPBindError,
    LDAPNoSuchObjectResult,
    LDAPSocketOpenError,
    LDAPSocketReceiveError,
)
from ldap3.utils.ciDict import CaseInsensitiveDict

from ad_lookup.ad import ADHost, DirectoryEntry, UserLookupService


def make_entry(dn: str, **attrs: list[str]) -> DirectoryEntry:
    return DirectoryEntry(dn=dn, attributes=CaseInsensitiveDict(attrs))


def group_dn(name: str) -> str:
    return f"CN={name},OU=Groups,DC=corp,DC=example,DC=com"


class FakeConnection:
    def __init__(self) -> None:
        self.connected = True
        self.bound = False
        self.close_calls = 0


class FakeDirectory:
    """In-memory DirectoryClient for one naming context.

    Entries are looked up by exact filter; a search under any other base DN
    fails with noSuchObject, as a real server does.
    """

    def __init__(self) -> None:
        self.base_dn = "dc=corp,dc=example,dc=com"
        self.results: dict[str, list[DirectoryEntry]] = {}
        # filter -> number of entries produced before the stream breaks
        self.broken_streams: dict[str, int] = {}
        self.search_bases: list[str] = []
        self.close_error: Exception | None = None
        self.failing_filters: set[str] = set()
        self.searches: list[str] = []
        self.connections: list[FakeConnection] = []
        self.password = "secret"
        self.connect_error: Exception | None = None
        self.report_not_connected = False
        self.silent_non_bind = False
        self.bind_error: Exception | None = None
        self.bind_principals: list[str] = []

    def add_user(self, username: str, **attrs: list[str]) -> None:
        flt = f"(&(objectClass=person)(objectCategory=user)(sAMAccountName={username}))"
        dn = f"CN={username},OU=Users,DC=corp,DC=example,DC=com"
        self.results.setdefault(flt, []).append(make_entry(dn, **attrs))

    def add_group(self, name: str, parents: Sequence[str] = ()) -> None:
        flt = f"(&(objectClass=group)(cn={name}))"
        self.results[flt] = [make_entry(group_dn(name), memberOf=[group_dn(p) for p in parents])]

    # DirectoryClient

    def connect(self, host: ADHost) -> FakeConnection:
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection()
        conn.connected = not self.report_not_connected
        self.connections.append(conn)
        return conn

    def is_connected(self, conn: FakeConnection) -> bool:
        return conn.connected

    def bind(self, conn: FakeConnection, principal: str, password: str) -> bool:
        self.bind_principals.append(principal)
        if self.bind_error is not None:
            raise self.bind_error
        if self.silent_non_bind:
            return True
        conn.bound = password == self.password
        return conn.bound

    def is_bound(self, conn: FakeConnection) -> bool:
        return conn.bound

    def search(self, conn: Any, base_dn: str, search_filter: str, attributes: Sequence[str]) -> Iterator[DirectoryEntry]:
        self.searches.append(search_filter)
        self.search_bases.append(base_dn)
        if search_filter in self.failing_filters:
            raise LDAPSocketOpenError("connection reset")
        if base_dn.lower() != self.base_dn:
            raise LDAPNoSuchObjectResult(result=32, description="noSuchObject", dn=base_dn)
        entries = list(self.results.get(search_filter, []))
        if search_filter in self.broken_streams:
            return _broken_stream(entries[: self.broken_streams[search_filter]])
        return iter(entries)

    def close(self, conn: FakeConnection) -> None:
        conn.close_calls += 1
        conn.connected = False
        if self.close_error is not None:
            raise self.close_error


def _broken_stream(entries: list[DirectoryEntry]) -> Iterator[DirectoryEntry]:
    yield from entries
    raise LDAPSocketReceiveError("connection closed by peer")


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def service(directory: FakeDirectory) -> UserLookupService:
    return UserLookupService("dc01.corp.example.com", 389, client=directory)


@pytest.fixture
def bind_error() -> Exception:
    return LDAPBindError("invalidCredentials")
