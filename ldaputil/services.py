from __future__ import annotations

from .ad import DirectoryClient, DirectoryConfig, DirectoryRecord
from .settings import Settings


def ad_cfg_from_settings(st: Settings) -> DirectoryConfig | None:
    if not (st.ad_address or "").strip():
        return None
    return DirectoryConfig(
        address=st.ad_address.strip(),
        base_dn=(st.ad_base_dn or "").strip(),
        suffix=(st.ad_suffix or "").strip(),
        tls_validate=bool(st.ad_tls_validate),
        ca_certs_file=(st.ad_ca_cert_file or "").strip(),
        timeout=float(st.ad_timeout),
    )


def fetch_user_record(st: Settings, account_name: str) -> DirectoryRecord:
    """Bind with the configured service credentials and fetch one user record."""
    cfg = ad_cfg_from_settings(st)
    if not cfg:
        raise ValueError("AD server address is not configured (set AD or pass -a)")
    client = DirectoryClient(cfg)
    return client.fetch_record(st.ad_bind_username, st.ad_bind_password, account_name)
