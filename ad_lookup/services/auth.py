from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..ad import UserLookupService
from ..ad_utils import split_group_names
from ..exceptions import (
    ADLookupError,
    AuthenticationError,
    DirectoryConnectionError,
    InvalidArgumentError,
    UserNotFoundError,
)

if TYPE_CHECKING:
    from ..settings import LookupSettings

log = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Outcome of a login attempt."""
    success: bool
    user_data: dict | None = None
    error_message: str = ""


def split_login(login: str, default_domain: str = "") -> tuple[str, str]:
    """Split a login into (domain, username).

    Accepts DOMAIN\\user, user@domain and a bare user (default domain).
    A DOMAIN prefix without a dot is a NetBIOS name, not a DNS domain, so
    the default domain is used for it.
    """
    login = (login or "").strip()
    default_domain = (default_domain or "").strip()
    if "\\" in login:
        domain, user = login.split("\\", 1)
        domain = domain.strip()
        if "." not in domain:
            domain = default_domain
        return domain, user.strip()
    if "@" in login:
        user, domain = login.rsplit("@", 1)
        return domain.strip(), user.strip()
    return default_domain, login


def authenticate(
    username: str,
    password: str,
    settings: "LookupSettings",
    domain: Optional[str] = None,
    service: Optional[UserLookupService] = None,
) -> AuthResult:
    """Authenticate through Active Directory and check the allowed groups.

    Args:
        username: login (user, DOMAIN\\user or user@domain)
        password: password
        settings: application settings
        domain: explicit domain, overrides the one in the login
        service: lookup service to use (built from settings if omitted)
    """
    login_domain, user = split_login(username, settings.ad_default_domain)
    domain = (domain or login_domain).strip()
    if not user or not domain:
        return AuthResult(success=False, error_message="Domain and user name are required.")

    try:
        svc = service or UserLookupService.from_settings(settings)
        profile = svc.get_user(domain, user, password)
    except (AuthenticationError, UserNotFoundError) as e:
        log.info("AD login rejected for %s\\%s: %s", domain, user, e)
        return AuthResult(success=False, error_message="Wrong user name or password.")
    except InvalidArgumentError as e:
        log.warning("AD is not configured correctly: %s", e)
        return AuthResult(success=False, error_message="AD is not configured (check the settings).")
    except DirectoryConnectionError as e:
        log.error("%s", e, exc_info=e.__cause__)
        return AuthResult(success=False, error_message="Directory server is unreachable.")
    except ADLookupError as e:
        log.error("AD lookup failed for %s\\%s: %s", domain, user, e, exc_info=e.__cause__)
        return AuthResult(success=False, error_message="Directory query failed.")

    allowed = set(split_group_names(settings.ad_allowed_groups))
    if allowed and not (profile.group_names & allowed):
        log.info("AD login denied for %s: not in allowed groups", profile.user_name)
        return AuthResult(success=False, error_message="Access denied: user is not in an allowed group.")

    user_data = {
        "username": profile.user_name,
        "display_name": profile.display_name or user,
        "email": profile.email,
        "company": profile.company_name,
        "auth": "ad",
        "groups": sorted(profile.group_names),
    }
    return AuthResult(success=True, user_data=user_data)
