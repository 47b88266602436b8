"""Application configuration models and loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from podscope.constants.defaults import (
    CONFIG_FILE_NAME,
    KUBECONFIG_DEFAULT_NAME,
    KUBECONFIG_DEFAULT_PATH,
    LOG_LEVEL_DEFAULT,
    REFRESH_INTERVAL_DEFAULT,
    SSH_PORT_DEFAULT,
    SSH_USER_DEFAULT,
)
from podscope.constants.values import APP_DIR_NAME

logger = logging.getLogger(__name__)


class KubeConfigEntry(BaseModel):
    """Named kubeconfig file the user can connect with."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    context: str = ""
    default: bool = False

    @field_validator("path")
    @classmethod
    def _expand_path(cls, value: str) -> str:
        return str(Path(value).expanduser())


class SSHHost(BaseModel):
    """Remote node reachable over SSH for crictl inspection."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    host: str
    user: str = SSH_USER_DEFAULT
    port: int = SSH_PORT_DEFAULT
    key_path: str = ""

    @field_validator("key_path")
    @classmethod
    def _expand_key_path(cls, value: str) -> str:
        return str(Path(value).expanduser()) if value else ""

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}"


class AppConfig(BaseModel):
    """Application configuration model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    kubeconfigs: list[KubeConfigEntry] = Field(default_factory=list)
    ssh_hosts: list[SSHHost] = Field(default_factory=list, alias="sshHosts")
    refresh_interval: float = Field(default=REFRESH_INTERVAL_DEFAULT, gt=0)
    log_level: str = LOG_LEVEL_DEFAULT

    def default_kubeconfig(self) -> KubeConfigEntry | None:
        """Return the entry marked default, else the only entry."""
        for entry in self.kubeconfigs:
            if entry.default:
                return entry
        if len(self.kubeconfigs) == 1:
            return self.kubeconfigs[0]
        return None


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when the configuration file cannot be read or validated."""


class ConfigManager:
    """Loads AppConfig from a YAML file."""

    @staticmethod
    def app_dir() -> Path:
        return Path.home() / APP_DIR_NAME

    @classmethod
    def default_path(cls) -> Path:
        return cls.app_dir() / CONFIG_FILE_NAME

    @classmethod
    def load(cls, path: str | Path | None = None) -> AppConfig:
        """Load configuration, discovering a kubeconfig when none is listed.

        A missing file at the default location is not an error; an explicitly
        requested file that is missing, unreadable or invalid raises
        ConfigLoadError.
        """
        config_path = Path(path).expanduser() if path else cls.default_path()
        raw: object = {}
        if config_path.is_file():
            try:
                with open(config_path, encoding="utf-8") as handle:
                    raw = yaml.safe_load(handle) or {}
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigLoadError(f"cannot read {config_path}: {exc}") from exc
        elif path:
            raise ConfigLoadError(f"config file not found: {config_path}")

        if not isinstance(raw, dict):
            raise ConfigLoadError(f"{config_path}: expected a mapping at top level")

        try:
            config = AppConfig.model_validate(raw)
        except ValidationError as exc:
            raise ConfigLoadError(f"{config_path}: {exc}") from exc

        if not config.kubeconfigs:
            discovered = cls._discover_kubeconfig()
            if discovered is not None:
                config.kubeconfigs.append(discovered)
        logger.info(
            "Loaded config: %d kubeconfig(s), %d ssh host(s)",
            len(config.kubeconfigs),
            len(config.ssh_hosts),
        )
        return config

    @staticmethod
    def _discover_kubeconfig() -> KubeConfigEntry | None:
        env_value = os.environ.get("KUBECONFIG", "")
        candidate = env_value.split(os.pathsep)[0] if env_value else KUBECONFIG_DEFAULT_PATH
        candidate_path = Path(candidate).expanduser()
        if not candidate_path.is_file():
            return None
        return KubeConfigEntry(
            name=KUBECONFIG_DEFAULT_NAME,
            path=str(candidate_path),
            default=True,
        )
