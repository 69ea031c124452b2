"""Application configuration contract."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aurwatch.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    repo_dir: str = Field(alias="REPO_DIR", default="")
    tmp_dir: str = Field(alias="TMP_DIR", default="")
    refresh_interval_seconds: int = Field(alias="REFRESH_INTERVAL_SECONDS", default=3600)
    update_concurrency: int = Field(alias="UPDATE_CONCURRENCY", default=10)
    job_poll_interval_seconds: int = Field(alias="JOB_POLL_INTERVAL_SECONDS", default=60)

    aur_base_url: str = Field(alias="AUR_BASE_URL", default="https://aur.archlinux.org")
    aur_timeout_seconds: int = Field(alias="AUR_TIMEOUT_SECONDS", default=20)

    git_url: str = Field(alias="GIT_URL", default="")
    git_user: str = Field(alias="GIT_USER", default="")
    git_token: str = Field(alias="GIT_TOKEN", default="")
    git_author_name: str = Field(alias="GIT_AUTHOR_NAME", default="aurwatch")
    git_author_email: str = Field(alias="GIT_AUTHOR_EMAIL", default="aurwatch@localhost")

    rbuild_url: str = Field(alias="RBUILD_URL", default="")
    rbuild_user: str = Field(alias="RBUILD_USER", default="")
    rbuild_token: str = Field(alias="RBUILD_TOKEN", default="")

    dmanager_url: str = Field(alias="DMANAGER_URL", default="")
    dmanager_user: str = Field(alias="DMANAGER_USER", default="")
    dmanager_token: str = Field(alias="DMANAGER_TOKEN", default="")

    telegram_bot_token: str = Field(alias="TELEGRAM_BOT_TOKEN", default="")
    telegram_chat_id: str = Field(alias="TELEGRAM_CHAT_ID", default="")


def validate_settings(settings: Settings) -> None:
    """Raise ConfigError naming every required option that is still empty."""
    required_non_empty = {
        "REPO_DIR": settings.repo_dir,
        "TMP_DIR": settings.tmp_dir,
        "GIT_URL": settings.git_url,
        "GIT_USER": settings.git_user,
        "RBUILD_URL": settings.rbuild_url,
        "RBUILD_USER": settings.rbuild_user,
        "RBUILD_TOKEN": settings.rbuild_token,
        "DMANAGER_URL": settings.dmanager_url,
        "DMANAGER_USER": settings.dmanager_user,
        "DMANAGER_TOKEN": settings.dmanager_token,
    }
    missing = [key for key, value in required_non_empty.items() if not value.strip()]

    if settings.update_concurrency < 1:
        missing.append("UPDATE_CONCURRENCY(>= 1)")
    if settings.job_poll_interval_seconds < 1:
        missing.append("JOB_POLL_INTERVAL_SECONDS(>= 1)")
    if bool(settings.telegram_bot_token.strip()) != bool(settings.telegram_chat_id.strip()):
        missing.append("TELEGRAM_BOT_TOKEN/TELEGRAM_CHAT_ID(set both or neither)")

    if missing:
        keys = ", ".join(sorted(set(missing)))
        raise ConfigError(f"invalid configuration: {keys}")


def create_environment(settings: Settings) -> Path:
    """Create the scratch root; the package directory must already exist."""
    repo_dir = Path(settings.repo_dir)
    if not repo_dir.is_dir():
        raise ConfigError(f"REPO_DIR is not a directory: {repo_dir}")
    tmp_dir = Path(settings.tmp_dir)
    tmp_dir.mkdir(parents=True, exist_ok=True)
    return tmp_dir


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
