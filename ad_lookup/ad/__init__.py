"""Active Directory (LDAP) lookup package.

Public API:
    - ADHost, UserProfile, DirectoryEntry
    - DirectoryClient, LdapDirectoryClient
    - GroupResolver
    - UserLookupService
"""

from .models import ADHost, DirectoryEntry, UserProfile
from .client import DirectoryClient, LdapDirectoryClient
from .groups import GroupResolver
from .lookup import UserLookupService

__all__ = [
    "ADHost",
    "DirectoryEntry",
    "UserProfile",
    "DirectoryClient",
    "LdapDirectoryClient",
    "GroupResolver",
    "UserLookupService",
]
