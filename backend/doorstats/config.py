from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    app_name: str = "BBS Door Stats"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Log ingestion
    log_dir: str = "/var/log"
    log_glob: str = "syslog*"
    refresh_interval_seconds: int = 24 * 60 * 60  # 24 hours

    # Synchronet external program config
    xtrn_config: str = "/sbbs/ctrl/xtrn.ini"
    resolve_metadata: bool = True

    # Exclusions
    excluded_game: str = "Bullseye Bulletins"
    sysop_category: str = "ZZZ_SysOp"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
