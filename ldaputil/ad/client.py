from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence
import ssl

from ldap3 import (
    Server,
    Connection,
    NONE,
    SIMPLE,
    SUBTREE,
    DEREF_NEVER,
    Tls,
    ALL_ATTRIBUTES,
)
from ldap3.core.exceptions import LDAPException, LDAPCommunicationError, LDAPSSLConfigurationError
from ldap3.core.results import RESULT_SUCCESS

from .errors import (
    AmbiguousResultError,
    AuthError,
    NetworkError,
    NotFoundError,
    SearchError,
)
from .models import DirectoryConfig, DirectoryRecord, build_record
from .utils import decode_value, user_filter


class DirectoryClient:
    """LDAPS client fetching user records from Active Directory.

    Every logical operation opens its own connection (see ``session``);
    nothing is shared between calls apart from the ldap3 ``Server``.
    """

    def __init__(self, cfg: DirectoryConfig) -> None:
        self.cfg = cfg

        # CERT_NONE only when the caller opted out of verification.
        tls_kwargs: dict[str, Any] = {
            "validate": ssl.CERT_REQUIRED if cfg.tls_validate else ssl.CERT_NONE,
        }
        if cfg.tls_validate and cfg.ca_certs_file:
            tls_kwargs["ca_certs_file"] = cfg.ca_certs_file

        try:
            tls = Tls(**tls_kwargs)
        except LDAPSSLConfigurationError as e:
            raise ValueError(f"invalid TLS configuration: {e}") from e

        self.server = Server(
            host=cfg.host,
            port=cfg.port,
            use_ssl=True,
            get_info=NONE,
            tls=tls,
            connect_timeout=cfg.timeout,
        )

    # ---------------------------
    # connection / bind
    # ---------------------------

    def connect(self) -> Connection:
        """Open a TLS session to the server. The session is not bound yet."""
        conn = Connection(
            self.server,
            auto_bind=False,
            read_only=True,
            auto_referrals=False,
            receive_timeout=self.cfg.timeout,
        )
        try:
            conn.open()
        except LDAPException as e:
            self.close(conn)
            raise NetworkError(f"cannot connect to {self.cfg.address}: {e}", address=self.cfg.address) from e
        return conn

    def authenticate(self, conn: Connection, username: str, password: str) -> None:
        """Simple bind as ``username + suffix``.

        The connection is closed before any error is raised.
        """
        principal = self.cfg.bind_principal(username)
        if not password:
            # AD treats a simple bind with an empty password as an anonymous bind
            self.close(conn)
            raise AuthError(f"empty password for {principal}", principal=principal)

        try:
            conn.user = principal
            conn.password = password
            conn.authentication = SIMPLE
            ok = bool(conn.bind())
        except LDAPCommunicationError as e:
            self.close(conn)
            raise NetworkError(f"connection to {self.cfg.address} lost during bind: {e}", address=self.cfg.address) from e
        except LDAPException as e:
            res = dict(conn.result or {})
            self.close(conn)
            raise AuthError(
                f"bind as {principal} failed: {e}",
                principal=principal,
                result=res.get("result"),
                description=str(res.get("description", "")),
                server_message=str(res.get("message", "") or e),
            ) from e

        if not ok:
            res = dict(conn.result or {})
            self.close(conn)
            raise AuthError(
                f"bind as {principal} failed: {res.get('description', 'unknown error')}",
                principal=principal,
                result=res.get("result"),
                description=str(res.get("description", "")),
                server_message=str(res.get("message", "")),
            )

    @staticmethod
    def close(conn: Optional[Connection]) -> None:
        if conn is None or conn.closed:
            return
        try:
            conn.unbind()
        except LDAPException:
            pass

    @contextmanager
    def session(self, username: str, password: str) -> Iterator[Connection]:
        """Connected and bound connection, unbound on exit."""
        conn = self.connect()
        try:
            self.authenticate(conn, username, password)
            yield conn
        finally:
            self.close(conn)

    def verify_credentials(self, username: str, password: str) -> bool:
        try:
            with self.session(username, password):
                return True
        except AuthError:
            return False

    # ---------------------------
    # search
    # ---------------------------

    def search_filter(
        self,
        conn: Connection,
        flt: str,
        attributes: Optional[Sequence[str]] = None,
    ) -> list[dict]:
        """All entries under the base DN matching ``flt``.

        Empty ``attributes`` means every user attribute.
        """
        base = self.cfg.search_base
        if not base:
            raise SearchError("base DN is empty (set it or use a domain suffix)", search_filter=flt)

        try:
            conn.search(
                search_base=base,
                search_filter=flt,
                search_scope=SUBTREE,
                dereference_aliases=DEREF_NEVER,
                attributes=list(attributes) if attributes else ALL_ATTRIBUTES,
                size_limit=0,
                time_limit=0,
                types_only=False,
            )
        except LDAPCommunicationError as e:
            raise NetworkError(f"connection to {self.cfg.address} lost during search: {e}", address=self.cfg.address) from e
        except LDAPException as e:
            raise SearchError(f"search {flt} failed: {e}", search_filter=flt) from e

        res = dict(conn.result or {})
        code = res.get("result", RESULT_SUCCESS)
        if code != RESULT_SUCCESS:
            raise SearchError(
                f"search {flt} failed: {res.get('description', code)} {res.get('message', '')}".rstrip(),
                search_filter=flt,
            )

        # searchResRef continuations are skipped, referrals are not chased
        return [r for r in (conn.response or []) if r.get("type") == "searchResEntry"]

    def search_one(
        self,
        conn: Connection,
        flt: str,
        attributes: Optional[Sequence[str]] = None,
    ) -> dict:
        entries = self.search_filter(conn, flt, attributes)
        if not entries:
            raise NotFoundError(f"no entry matches {flt}", search_filter=flt)
        if len(entries) > 1:
            raise AmbiguousResultError(
                f"{len(entries)} entries match {flt}, expected 1",
                search_filter=flt,
                count=len(entries),
            )
        return entries[0]

    def full_record(self, conn: Connection, account_name: str) -> DirectoryRecord:
        """Every attribute of the user whose sAMAccountName is ``account_name``."""
        if not (account_name or "").strip():
            raise ValueError("empty account name")
        entry = self.search_one(conn, user_filter(account_name))
        return entry_to_record(entry)

    def fetch_record(self, username: str, password: str, account_name: str) -> DirectoryRecord:
        with self.session(username, password) as conn:
            return self.full_record(conn, account_name)


def entry_to_record(entry: dict) -> DirectoryRecord:
    """Flatten an ldap3 response entry into a record.

    Uses the raw values so nothing is reformatted by a schema.
    """
    raw = entry.get("raw_attributes") or entry.get("attributes") or {}
    pairs = []
    for name, v in raw.items():
        vals = v if isinstance(v, (list, tuple)) else [v]
        pairs.append((name, [decode_value(x) for x in vals]))
    return build_record(pairs)
