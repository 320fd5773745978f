from __future__ import annotations

DEFAULT_LDAPS_PORT = 636


def domain_to_base_dn(domain: str) -> str:
    domain = (domain or "").strip().lstrip("@").strip(".")
    if not domain or "." not in domain:
        return ""
    parts = [p for p in domain.split(".") if p]
    return ",".join([f"DC={p}" for p in parts])


def suffix_domain(suffix: str) -> str:
    """Domain part of an account suffix (``@corp.example`` -> ``corp.example``)."""
    s = (suffix or "").strip()
    if "@" in s:
        s = s.rsplit("@", 1)[1]
    return s.strip(".")


def split_address(address: str, default_port: int = DEFAULT_LDAPS_PORT) -> tuple[str, int]:
    """Split ``host:port`` into its parts.

    IPv6 literals must be bracketed when a port is given (``[::1]:636``).
    A bare host gets ``default_port``.
    """
    addr = (address or "").strip()
    if not addr:
        raise ValueError("empty server address")

    if addr.startswith("["):
        host, sep, rest = addr[1:].partition("]")
        if not sep:
            raise ValueError(f"unterminated IPv6 literal in {address!r}")
        if not rest:
            return host, default_port
        if not rest.startswith(":"):
            raise ValueError(f"unexpected text after IPv6 literal in {address!r}")
        port_s = rest[1:]
    elif addr.count(":") == 1:
        host, port_s = addr.split(":", 1)
    else:
        # bare hostname or unbracketed IPv6 literal
        return addr, default_port

    if not host:
        raise ValueError(f"missing host in {address!r}")
    try:
        port = int(port_s)
    except ValueError:
        raise ValueError(f"invalid port in {address!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in {address!r}")
    return host, port
