from __future__ import annotations


def domain_to_base_dn(domain: str) -> str:
    """corp.example.com -> dc=corp,dc=example,dc=com"""
    domain = (domain or "").strip()
    return ",".join(f"dc={p}" for p in domain.split("."))


def bind_principal(username: str, domain: str) -> str:
    return f"{username}@{domain}"


def split_group_names(text: str) -> list[str]:
    if not text:
        return []
    return [x.strip() for x in text.split(";") if x.strip()]
