from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Optional

from ldap3.core.exceptions import LDAPException

from ..ad_utils import bind_principal, domain_to_base_dn
from ..exceptions import (
    AuthenticationError,
    DirectoryConnectionError,
    InvalidArgumentError,
    SearchError,
    UserNotFoundError,
)
from ..utils.dn import extract_common_name
from .client import DirectoryClient, LdapDirectoryClient
from .groups import GroupResolver
from .models import ADHost, DirectoryEntry, UserProfile
from .utils import join_values, user_filter

if TYPE_CHECKING:
    from ..settings import LookupSettings

log = logging.getLogger(__name__)

# "uid" and "samaccountname" are not mapped; they only help when reading debug output.
USER_ATTRIBUTES = ["uid", "mail", "memberof", "samaccountname", "company", "displayname"]


class UserLookupService:
    """Authenticates a user by bind and loads the profile with all (nested) groups."""

    def __init__(self, host: str, port: int, client: Optional[DirectoryClient] = None) -> None:
        self.host = ADHost(host=host, port=port)
        self.client: DirectoryClient = client if client is not None else LdapDirectoryClient()
        self.groups = GroupResolver(self.client)

    @classmethod
    def from_settings(cls, settings: "LookupSettings") -> "UserLookupService":
        client = LdapDirectoryClient(
            use_ssl=settings.ad_use_ssl,
            tls_validate=settings.ad_tls_validate,
            connect_timeout=settings.ad_connect_timeout,
        )
        return cls(settings.ad_host, settings.ad_port, client=client)

    @contextmanager
    def _connection(self) -> Iterator[Any]:
        try:
            conn = self.client.connect(self.host)
        except LDAPException as e:
            raise DirectoryConnectionError(f"Error connecting to {self.host}") from e

        try:
            if not self.client.is_connected(conn):
                raise DirectoryConnectionError(f"Error connecting to {self.host}")
            yield conn
        finally:
            try:
                self.client.close(conn)
            except LDAPException as e:
                log.debug("Unbind from %s failed: %s", self.host, e)

    def _bind(self, conn: Any, domain: str, username: str, password: str) -> None:
        who = f"{domain}\\{username}"
        try:
            ok = self.client.bind(conn, bind_principal(username, domain), password)
        except LDAPException as e:
            raise AuthenticationError(f"Wrong credentials for {who}") from e
        # A bind that reports success but leaves the connection unbound is still a failure.
        if not ok or not self.client.is_bound(conn):
            raise AuthenticationError(f"Wrong credentials for {who}")

    def _find_user_entry(self, conn: Any, base_dn: str, flt: str) -> Optional[DirectoryEntry]:
        try:
            entries = self.client.search(conn, base_dn, flt, USER_ATTRIBUTES)
            # sAMAccountName is unique per domain; only the first entry is read.
            return next(iter(entries), None)
        except LDAPException as e:
            raise SearchError(f"Error searching for {flt}", flt) from e

    def get_user(self, domain: str, username: str, password: str) -> UserProfile:
        """Return the user if it exists and its password is correct.

        Raises an ADLookupError subclass otherwise; no partial profile is
        ever returned.
        """
        if not domain or not domain.strip():
            raise InvalidArgumentError("domain")
        domain = domain.strip()

        base_dn = domain_to_base_dn(domain)
        flt = user_filter(username)

        with self._connection() as conn:
            log.debug("Connected to %s, binding as %s", self.host, bind_principal(username, domain))
            self._bind(conn, domain, username, password)

            entry = self._find_user_entry(conn, base_dn, flt)
            if entry is None:
                log.warning("User not found: %s\\%s", domain, username)
                raise UserNotFoundError(f"Nothing found while searching for {flt}", flt)

            profile = profile_from_entry(entry, f"{domain}\\{username}")
            profile.group_names |= self.groups.resolve(conn, base_dn, set(profile.group_names))

        log.info("Loaded user %s (%d groups)", profile.user_name, len(profile.group_names))
        return profile


def profile_from_entry(entry: DirectoryEntry, user_name: str) -> UserProfile:
    """Map a user entry to a profile; memberOf yields the direct group names only."""
    profile = UserProfile(user_name=user_name)
    for key, values in entry.attributes.items():
        attr = key.lower()
        if attr == "company":
            profile.company_name = join_values(values)
        elif attr == "mail":
            profile.email = join_values(values)
        elif attr == "displayname":
            profile.display_name = join_values(values)
        elif attr == "memberof":
            for dn in values:
                name = extract_common_name(dn)
                if name is not None:
                    profile.group_names.add(name)
    return profile
