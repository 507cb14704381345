from __future__ import annotations

from typing import Optional

_CN_PREFIX = "CN="
_ESCAPED_COMMA = "\\,"
# Stand-in for "\," while scanning for the RDN separator.
_SENTINEL = "@#$"


def extract_common_name(dn: str) -> Optional[str]:
    """Return the value of the first CN component of a DN.

    CN=Smith\\, John,OU=Users,DC=corp -> Smith\\, John (escape kept as is).
    Returns None when the DN has no CN component.
    """
    if not dn:
        return None

    s = dn.replace(_ESCAPED_COMMA, _SENTINEL)
    start = s.find(_CN_PREFIX)
    if start == -1:
        return None

    start += len(_CN_PREFIX)
    end = s.find(",", start)
    if end == -1:
        end = len(s)
    return s[start:end].replace(_SENTINEL, _ESCAPED_COMMA)
