from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # AD (env names kept compatible with the old test harness: AD, AD_SUFF, AD_BDN)
    ad_address: str = Field("", alias="AD")
    ad_suffix: str = Field("", alias="AD_SUFF")
    ad_base_dn: str = Field("", alias="AD_BDN")
    ad_bind_username: str = Field("", alias="AD_USER")
    ad_bind_password: str = Field("", alias="AD_PASS")

    # TLS validation is on unless explicitly disabled
    ad_tls_validate: bool = Field(True, alias="AD_TLS_VALIDATE")
    ad_ca_cert_file: str = Field("", alias="AD_CA_CERT_FILE")
    ad_timeout: float = Field(10.0, alias="AD_TIMEOUT")

    # Logging
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    log_file: str = Field("", alias="LOG_FILE")

    class Config:
        populate_by_name = True


def get_settings() -> Settings:
    return Settings()
