from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Callable, Sequence

from .ad import (
    AuthError,
    DirectoryError,
    DirectoryRecord,
    FormatError,
    NetworkError,
    SearchError,
    full_name,
    membership_common_names,
    organizational_unit,
)
from .log_config import setup_logging
from .services import fetch_user_record
from .settings import get_settings

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_NETWORK = 3
EXIT_AUTH = 4
EXIT_SEARCH = 5
EXIT_FORMAT = 6


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ldapq",
        description="Print the Active Directory record of a user.",
        epilog="Unset flags fall back to the AD, AD_SUFF, AD_BDN, AD_USER and AD_PASS environment variables.",
    )
    parser.add_argument("-a", dest="address", help="LDAP server address (host:port, port defaults to 636)")
    parser.add_argument("-s", dest="suffix", help="account suffix appended to the bind user (e.g. @corp.example)")
    parser.add_argument("-b", dest="base_dn", help="base DN for the search (derived from the suffix if empty)")
    parser.add_argument("-u", dest="user", help="user name for binding")
    parser.add_argument("-p", dest="password", help="password for binding (prompted for if missing)")
    parser.add_argument("-q", dest="query", required=True, help="sAMAccountName of the user to look up")
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="do not verify the server's TLS certificate",
    )
    parser.add_argument("--ca-file", help="CA bundle used to verify the server certificate")
    parser.add_argument("--timeout", type=float, help="connect/receive timeout in seconds")
    parser.add_argument(
        "--summary",
        action="store_true",
        help="also print full name, organizational unit and group names",
    )
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def format_record(record: DirectoryRecord) -> str:
    lines: list[str] = []
    for name, values in record.items():
        lines.append(f"{name}:")
        for v in values:
            lines.append(f"    {v}")
    return "\n".join(lines)


def format_summary(record: DirectoryRecord) -> str:
    fields: list[tuple[str, Callable[[DirectoryRecord], object]]] = [
        ("full name", full_name),
        ("organizational unit", organizational_unit),
        ("groups", lambda r: ", ".join(membership_common_names(r))),
    ]
    lines: list[str] = []
    for label, fn in fields:
        try:
            value = fn(record)
        except (FormatError, SearchError) as e:
            log.warning("%s unavailable: %s", label, e)
            value = "-"
        lines.append(f"{label}: {value}")
    return "\n".join(lines)


def exit_code_for(e: Exception) -> int:
    if isinstance(e, NetworkError):
        return EXIT_NETWORK
    if isinstance(e, AuthError):
        return EXIT_AUTH
    if isinstance(e, SearchError):
        return EXIT_SEARCH
    if isinstance(e, FormatError):
        return EXIT_FORMAT
    return EXIT_USAGE


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        st = get_settings()
    except ValueError as e:
        # pydantic ValidationError from a malformed environment value
        setup_logging()
        log.error("invalid settings: %s", e)
        return EXIT_USAGE

    overrides = {
        "ad_address": args.address,
        "ad_suffix": args.suffix,
        "ad_base_dn": args.base_dn,
        "ad_bind_username": args.user,
        "ad_bind_password": args.password,
        "ad_ca_cert_file": args.ca_file,
        "ad_timeout": args.timeout,
        "log_level": args.log_level,
    }
    update = {k: v for k, v in overrides.items() if v is not None}
    if args.insecure:
        update["ad_tls_validate"] = False
    st = st.model_copy(update=update)

    setup_logging(level=st.log_level, log_file=st.log_file or None)

    if not st.ad_bind_password:
        st = st.model_copy(
            update={"ad_bind_password": getpass.getpass(f"Password for {st.ad_bind_username}{st.ad_suffix}: ")}
        )

    if not st.ad_tls_validate:
        log.warning("TLS certificate verification is disabled")

    try:
        record = fetch_user_record(st, args.query)
    except DirectoryError as e:
        log.error("%s", e)
        if isinstance(e, AuthError) and e.ad_reason:
            log.error("server reason: %s", e.ad_reason)
        return exit_code_for(e)
    except ValueError as e:
        log.error("%s", e)
        return EXIT_USAGE

    log.info("fetched %d attributes for %s", len(record), args.query)
    print(format_record(record))
    if args.summary:
        print(format_summary(record))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
