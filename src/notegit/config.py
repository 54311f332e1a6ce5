"""Configuration module for notegit.

Settings are read from ``NOTEGIT_*`` environment variables and ``.env`` files
every time :func:`load_config` is called, so each sync run sees the current
values. The files are parsed on each call and never copied into
``os.environ``.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from notegit.exceptions import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)

# Lowest precedence first: project .env, user .env, process environment,
# then an explicit --env-file.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_PROJECT_ENV = _PROJECT_ROOT / ".env"
_USER_ENV = Path.home() / ".notegit" / ".env"

SETTINGS_SECTION = {
    "name": "gitSync",
    "label": "Git Sync Settings",
    "icon": "fas fa-sync-alt",
    "description": "Configure the Git Sync plugin settings.",
}

_TRUE_VALUES = ("true", "1", "yes")

# Field name -> environment variable
ENV_VARS = {
    "git_repo_url": "NOTEGIT_GIT_REPO_URL",
    "git_executable_path": "NOTEGIT_GIT_EXECUTABLE_PATH",
    "enable_notifications": "NOTEGIT_ENABLE_NOTIFICATIONS",
    "sync_interval": "NOTEGIT_SYNC_INTERVAL",
    "branch_name": "NOTEGIT_BRANCH_NAME",
    "local_path_dir": "NOTEGIT_LOCAL_PATH_DIR",
    "clone_settle_seconds": "NOTEGIT_CLONE_SETTLE_SECONDS",
    "git_timeout": "NOTEGIT_GIT_TIMEOUT",
    "git_user_name": "NOTEGIT_GIT_USER_NAME",
    "git_user_email": "NOTEGIT_GIT_USER_EMAIL",
    "joplin_api_url": "NOTEGIT_JOPLIN_API_URL",
    "joplin_api_token": "NOTEGIT_JOPLIN_API_TOKEN",
}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in _TRUE_VALUES


def _setting(label: str, description: str) -> Dict[str, Any]:
    return {
        "section": SETTINGS_SECTION["name"],
        "label": label,
        "description": description,
        "public": True,
    }


class SyncConfig(BaseModel):
    """Settings for one export-and-sync run."""

    # Environment values arrive as strings and are coerced by the field types
    model_config = ConfigDict(validate_default=True)

    git_repo_url: str = Field(
        default_factory=lambda: os.getenv("NOTEGIT_GIT_REPO_URL", ""),
        json_schema_extra=_setting(
            "Git Repository URL",
            "Enter the Git repository SSH remote URL like git@github.com:user/repo.git",
        ),
    )
    git_executable_path: str = Field(
        default_factory=lambda: os.getenv("NOTEGIT_GIT_EXECUTABLE_PATH", "") or "git",
        json_schema_extra=_setting(
            "Git Executable Path", "Path to the Git executable on your system."
        ),
    )
    enable_notifications: bool = Field(
        default_factory=lambda: _env_bool("NOTEGIT_ENABLE_NOTIFICATIONS", "true"),
        json_schema_extra=_setting(
            "Enable Notifications",
            "Enable or disable notifications for export and commit events.",
        ),
    )
    sync_interval: int = Field(
        default_factory=lambda: os.getenv("NOTEGIT_SYNC_INTERVAL", "5"),
        json_schema_extra=_setting(
            "Check Sync Interval (in minutes)",
            "Interval in minutes to check for sync and trigger export.",
        ),
    )
    branch_name: str = Field(
        default_factory=lambda: os.getenv("NOTEGIT_BRANCH_NAME", ""),
        json_schema_extra=_setting("Branch Name", "Specify the branch to push to."),
    )
    local_path_dir: str = Field(
        default_factory=lambda: os.getenv("NOTEGIT_LOCAL_PATH_DIR", ""),
        json_schema_extra=_setting(
            "Local Path Directory to Export Notes to",
            "Specify the local path directory to export notes to.",
        ),
    )
    # Seconds to wait after a clone before running further git commands
    clone_settle_seconds: float = Field(
        default_factory=lambda: os.getenv("NOTEGIT_CLONE_SETTLE_SECONDS", "10")
    )
    # None means git commands run to completion
    git_timeout: Optional[float] = Field(
        default_factory=lambda: os.getenv("NOTEGIT_GIT_TIMEOUT") or None
    )
    # Commit identity, passed as -c overrides when set
    git_user_name: Optional[str] = Field(
        default_factory=lambda: os.getenv("NOTEGIT_GIT_USER_NAME") or None
    )
    git_user_email: Optional[str] = Field(
        default_factory=lambda: os.getenv("NOTEGIT_GIT_USER_EMAIL") or None
    )
    # Joplin Data API (Web Clipper service)
    joplin_api_url: str = Field(
        default_factory=lambda: os.getenv(
            "NOTEGIT_JOPLIN_API_URL", "http://localhost:41184"
        )
    )
    joplin_api_token: str = Field(
        default_factory=lambda: os.getenv("NOTEGIT_JOPLIN_API_TOKEN", "")
    )

    @field_validator("sync_interval")
    @classmethod
    def _validate_interval(cls, value: int) -> int:
        if value < 1:
            raise ValueError("sync_interval must be >= 1 minute")
        return value

    @field_validator("branch_name", "local_path_dir", "git_repo_url")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("git_executable_path", mode="before")
    @classmethod
    def _default_executable(cls, value: Any) -> Any:
        return value or "git"

    @field_validator("git_timeout", "git_user_name", "git_user_email", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("enable_notifications", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_VALUES
        return value

    @property
    def is_configured(self) -> bool:
        """Both the branch and the export directory are set."""
        return bool(self.branch_name) and bool(self.local_path_dir)

    @property
    def sync_interval_seconds(self) -> float:
        return self.sync_interval * 60.0

    def get_export_dir(self) -> Path:
        """Absolute path of the export directory (``~`` expanded)."""
        return Path(self.local_path_dir).expanduser()


def load_config(
    env_file: Optional[Union[str, Path]] = None, **overrides: Any
) -> SyncConfig:
    """Build a fresh :class:`SyncConfig` from the environment.

    Precedence, highest first: ``overrides``, ``env_file``, the process
    environment, the user ``~/.notegit/.env``, the project ``.env``.

    Args:
        env_file: Extra ``.env`` file whose values win over the environment.
        **overrides: Field values that win over everything else.

    Raises:
        ConfigurationError: If a setting has an invalid value.
    """
    from_files: Dict[str, Optional[str]] = {
        **dotenv_values(_PROJECT_ENV),
        **dotenv_values(_USER_ENV),
    }
    source = {k: v for k, v in from_files.items() if k not in os.environ}
    if env_file:
        source.update(dotenv_values(env_file))

    values: Dict[str, Any] = {
        name: source[var]
        for name, var in ENV_VARS.items()
        if source.get(var) is not None
    }
    values.update(overrides)

    try:
        cfg = SyncConfig(**values)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid setting {key}: {first.get('msg')}",
            config_key=key or None,
            code=ErrorCode.CONFIG_INVALID,
        ) from e

    logger.debug(
        "Loaded settings: branch=%r dir=%r remote=%s",
        cfg.branch_name,
        cfg.local_path_dir,
        "set" if cfg.git_repo_url else "unset",
    )
    return cfg


def describe_settings() -> List[Dict[str, Any]]:
    """List the user-facing settings with their UI metadata."""
    entries = []
    for name, field in SyncConfig.model_fields.items():
        extra = field.json_schema_extra
        if not isinstance(extra, dict):
            continue
        entries.append(
            {
                "key": name,
                "type": field.annotation.__name__,
                **extra,
            }
        )
    return entries
