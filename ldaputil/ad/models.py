from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from ..ad_utils import DEFAULT_LDAPS_PORT, domain_to_base_dn, split_address, suffix_domain

# attribute name -> values, in the order the server returned them
DirectoryRecord = Dict[str, List[str]]


def build_record(pairs: Iterable[Tuple[str, Sequence[str]]]) -> DirectoryRecord:
    """Build a record from (name, values) pairs, keeping both orders."""
    record: DirectoryRecord = {}
    for name, values in pairs:
        record[name] = list(values)
    return record


@dataclass(frozen=True)
class DirectoryConfig:
    address: str
    base_dn: str = ""
    suffix: str = ""
    tls_validate: bool = True
    ca_certs_file: str = ""
    timeout: float = 10.0

    def __post_init__(self) -> None:
        # fail early on a malformed address
        split_address(self.address)
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @property
    def host(self) -> str:
        return split_address(self.address, DEFAULT_LDAPS_PORT)[0]

    @property
    def port(self) -> int:
        return split_address(self.address, DEFAULT_LDAPS_PORT)[1]

    @property
    def search_base(self) -> str:
        b = (self.base_dn or "").strip()
        if b:
            return b
        return domain_to_base_dn(suffix_domain(self.suffix))

    def bind_principal(self, username: str) -> str:
        return f"{username}{self.suffix}"
