"""Authenticate AD users by bind and resolve their nested group memberships."""

from .ad import (
    ADHost,
    DirectoryClient,
    DirectoryEntry,
    GroupResolver,
    LdapDirectoryClient,
    UserLookupService,
    UserProfile,
)
from .ad.utils import escape_filter_param
from .exceptions import (
    ADLookupError,
    AuthenticationError,
    DirectoryConnectionError,
    InvalidArgumentError,
    SearchError,
    UserNotFoundError,
)
from .utils.dn import extract_common_name

__all__ = [
    "ADHost",
    "DirectoryClient",
    "DirectoryEntry",
    "GroupResolver",
    "LdapDirectoryClient",
    "UserLookupService",
    "UserProfile",
    "escape_filter_param",
    "extract_common_name",
    "ADLookupError",
    "AuthenticationError",
    "DirectoryConnectionError",
    "InvalidArgumentError",
    "SearchError",
    "UserNotFoundError",
]
