from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class LookupSettings(BaseSettings):
    # AD
    ad_host: str = Field(..., alias="AD_HOST")
    ad_port: int = Field(389, alias="AD_PORT")
    ad_use_ssl: Optional[bool] = Field(None, alias="AD_USE_SSL")  # None: by port (636/3269)
    ad_tls_validate: bool = Field(False, alias="AD_TLS_VALIDATE")
    ad_connect_timeout: float = Field(10.0, alias="AD_CONNECT_TIMEOUT")
    ad_default_domain: str = Field("", alias="AD_DEFAULT_DOMAIN")

    # Authorization
    ad_allowed_groups: str = Field("", alias="AD_ALLOWED_GROUPS")  # ';' separated group names

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: str = Field("", alias="LOG_DIR")

    class Config:
        populate_by_name = True


@lru_cache(maxsize=1)
def get_settings() -> LookupSettings:
    return LookupSettings()
