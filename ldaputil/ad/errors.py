"""Error types raised by the directory client and the record accessors.

NetworkError   - the server could not be reached (TLS / socket level).
AuthError      - the bind was rejected.
SearchError    - the search failed or did not return exactly one entry.
FormatError    - an attribute is present but does not have the expected shape.
"""

from __future__ import annotations

import re
from typing import Optional

# AD sub-error codes found after "data" in bind error messages (Win32 codes).
AD_ERROR_CODES = {
    0x525: "ERROR_NO_SUCH_USER",
    0x52E: "ERROR_LOGON_FAILURE",
    0x530: "ERROR_INVALID_LOGON_HOURS",
    0x531: "ERROR_INVALID_WORKSTATION",
    0x532: "ERROR_PASSWORD_EXPIRED",
    0x533: "ERROR_ACCOUNT_DISABLED",
    0x701: "ERROR_ACCOUNT_EXPIRED",
    0x773: "ERROR_PASSWORD_MUST_CHANGE",
    0x775: "ERROR_ACCOUNT_LOCKED_OUT",
}

AD_ERROR_CODE_RE = re.compile(r"data\s+([0-9a-fA-F]+)")


def parse_ad_error_code(message: str) -> Optional[int]:
    """Extract the AD-specific error code from an LDAP bind error message."""
    match = AD_ERROR_CODE_RE.search(message or "")
    return int(match.group(1), 16) if match else None


class DirectoryError(Exception):
    """Base class for everything this package raises."""


class NetworkError(DirectoryError):
    def __init__(self, message: str, address: str = "") -> None:
        super().__init__(message)
        self.address = address


class AuthError(DirectoryError):
    def __init__(
        self,
        message: str,
        principal: str = "",
        result: Optional[int] = None,
        description: str = "",
        server_message: str = "",
    ) -> None:
        super().__init__(message)
        self.principal = principal
        self.result = result
        self.description = description
        self.ad_code = parse_ad_error_code(server_message)

    @property
    def ad_reason(self) -> str:
        if self.ad_code is None:
            return ""
        return AD_ERROR_CODES.get(self.ad_code, hex(self.ad_code))


class SearchError(DirectoryError):
    def __init__(self, message: str, search_filter: str = "") -> None:
        super().__init__(message)
        self.search_filter = search_filter


class NotFoundError(SearchError):
    count = 0


class AmbiguousResultError(SearchError):
    def __init__(self, message: str, search_filter: str = "", count: int = 2) -> None:
        super().__init__(message, search_filter=search_filter)
        self.count = count


class MissingAttributeError(SearchError):
    """A required attribute is absent from a fetched record."""

    def __init__(self, attribute: str) -> None:
        super().__init__(f"attribute {attribute} not found in record")
        self.attribute = attribute


class FormatError(DirectoryError):
    def __init__(
        self,
        message: str,
        attribute: str,
        expected: object = None,
        actual: object = None,
    ) -> None:
        super().__init__(message)
        self.attribute = attribute
        self.expected = expected
        self.actual = actual
