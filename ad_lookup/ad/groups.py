from __future__ import annotations

import logging
from collections import deque
from typing import Any, Iterable

from ldap3.core.exceptions import LDAPException

from ..exceptions import SearchError
from ..utils.dn import extract_common_name
from .client import DirectoryClient
from .utils import group_filter

log = logging.getLogger(__name__)

GROUP_ATTRIBUTES = ["uid", "memberof", "displayname"]


class GroupResolver:
    """Expands group names into the transitive "member of" closure.

    Works off an explicit queue with a visited set, so cyclic memberships
    terminate and every distinct group name is searched at most once.
    """

    def __init__(self, client: DirectoryClient) -> None:
        self.client = client

    def parent_groups(self, conn: Any, base_dn: str, group_name: str) -> set[str]:
        """Direct parents of one group (memberOf of every matching group entry)."""
        flt = group_filter(group_name)
        try:
            parents: set[str] = set()
            for entry in self.client.search(conn, base_dn, flt, GROUP_ATTRIBUTES):
                for dn in entry.values("memberof"):
                    name = extract_common_name(dn)
                    if name is not None:
                        parents.add(name)
        except LDAPException as e:
            raise SearchError(f"Error searching for {flt}", flt) from e
        return parents

    def resolve(self, conn: Any, base_dn: str, seed_group_names: Iterable[str]) -> set[str]:
        """Return every group reachable from the seed through memberOf.

        Seed names are only part of the result when some other group in the
        closure lists them as a parent.
        """
        visited: set[str] = set(seed_group_names)
        seed_count = len(visited)
        queue = deque(sorted(visited))
        discovered: set[str] = set()

        while queue:
            name = queue.popleft()
            for parent in self.parent_groups(conn, base_dn, name):
                discovered.add(parent)
                if parent not in visited:
                    visited.add(parent)
                    queue.append(parent)

        log.debug("Group closure: %d seed, %d discovered, %d searched", seed_count, len(discovered), len(visited))
        return discovered
