"""Accessors over an already fetched DirectoryRecord.

DN handling follows the Active Directory layout (``CN=...,OU=...,DC=...``):
components are split on commas and matched by prefix. Escaped commas are
not interpreted.
"""

from __future__ import annotations

from typing import List

from .errors import FormatError, MissingAttributeError
from .models import DirectoryRecord

MEMBER_OF = "memberOf"
CN = "cn"
DISTINGUISHED_NAME = "distinguishedName"
SAM_ACCOUNT_NAME = "sAMAccountName"

CN_PREFIX = "CN="
OU_PREFIX = "OU="


def _single_value(record: DirectoryRecord, attribute: str, label: str) -> str:
    if attribute not in record:
        raise FormatError(f"{label} not found ({attribute} field in AD record)", attribute, expected=1, actual=0)
    values = record[attribute]
    if len(values) != 1:
        raise FormatError(
            f"{label} field length is {len(values)} instead of 1",
            attribute,
            expected=1,
            actual=len(values),
        )
    return values[0]


def full_name(record: DirectoryRecord) -> str:
    return _single_value(record, CN, "Full name")


def account_name(record: DirectoryRecord) -> str:
    return _single_value(record, SAM_ACCOUNT_NAME, "Account name")


def membership(record: DirectoryRecord) -> List[str]:
    """Raw memberOf values (group DNs); empty when the user is in no group."""
    return list(record.get(MEMBER_OF, []))


def membership_common_names(record: DirectoryRecord) -> List[str]:
    """Group names taken from the leading CN= component of each memberOf DN."""
    if MEMBER_OF not in record:
        raise MissingAttributeError(MEMBER_OF)
    names: List[str] = []
    for dn in record[MEMBER_OF]:
        if not dn.startswith(CN_PREFIX):
            continue
        names.append(dn[len(CN_PREFIX):].split(",", 1)[0])
    return names


def organizational_unit(record: DirectoryRecord) -> str:
    """First OU= component of the user's distinguishedName."""
    if DISTINGUISHED_NAME not in record:
        raise MissingAttributeError(DISTINGUISHED_NAME)
    values = record[DISTINGUISHED_NAME]
    if not values:
        raise FormatError(
            f"Length of {DISTINGUISHED_NAME} should be > 0",
            DISTINGUISHED_NAME,
            expected=1,
            actual=0,
        )
    for part in values[0].split(","):
        if part.startswith(OU_PREFIX):
            return part[len(OU_PREFIX):]
    raise FormatError(
        f"{values[0]!r} has no component with prefix {OU_PREFIX}",
        DISTINGUISHED_NAME,
        expected=OU_PREFIX,
        actual=values[0],
    )
