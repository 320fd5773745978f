"""Active Directory (LDAP) record client.

Public API:
    - DirectoryConfig, DirectoryRecord, build_record
    - DirectoryClient
    - record accessors (full_name, membership, ...)
    - error types
"""

from .models import DirectoryConfig, DirectoryRecord, build_record
from .client import DirectoryClient, entry_to_record
from .errors import (
    DirectoryError,
    NetworkError,
    AuthError,
    SearchError,
    NotFoundError,
    AmbiguousResultError,
    MissingAttributeError,
    FormatError,
)
from .records import (
    account_name,
    full_name,
    membership,
    membership_common_names,
    organizational_unit,
)

__all__ = [
    "DirectoryConfig",
    "DirectoryRecord",
    "build_record",
    "DirectoryClient",
    "entry_to_record",
    "DirectoryError",
    "NetworkError",
    "AuthError",
    "SearchError",
    "NotFoundError",
    "AmbiguousResultError",
    "MissingAttributeError",
    "FormatError",
    "account_name",
    "full_name",
    "membership",
    "membership_common_names",
    "organizational_unit",
]
