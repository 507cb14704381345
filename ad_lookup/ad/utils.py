from __future__ import annotations

from typing import Any, Iterable

# Characters with a meaning of their own inside a search filter.
_FILTER_SPECIALS = ("(", ")", "&", "|", "=")


def escape_filter_param(value: str) -> str:
    """Neutralize filter metacharacters in an untrusted value.

    Backslashes are dropped first, then ( ) & | = get a backslash prefix.
    """
    out = (value or "").replace("\\", "")
    for ch in _FILTER_SPECIALS:
        out = out.replace(ch, "\\" + ch)
    return out


def join_values(values: Iterable[Any]) -> str:
    return ";".join(str(v) for v in values)


def to_str_list(value: Any) -> list[str]:
    """Normalize an ldap3 attribute value to a list of strings."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    out: list[str] = []
    for v in value:
        if isinstance(v, (bytes, bytearray)):
            out.append(bytes(v).decode("utf-8", errors="replace"))
        else:
            out.append(str(v))
    return out


def user_filter(username: str) -> str:
    return f"(&(objectClass=person)(objectCategory=user)(sAMAccountName={username}))"


def group_filter(group_name: str) -> str:
    return f"(&(objectClass=group)(cn={escape_filter_param(group_name)}))"
