from __future__ import annotations

from typing import Any

USER_FILTER_TEMPLATE = "(&(objectClass=user)(sAMAccountName={}))"


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def user_filter(account_name: str) -> str:
    """Filter matching the user object with the given sAMAccountName."""
    return USER_FILTER_TEMPLATE.format(escape_ldap_filter_value(account_name))


def decode_value(v: Any) -> str:
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).decode("utf-8", errors="replace")
    return str(v)
