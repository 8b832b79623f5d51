"""bddgov configuration: Pydantic model, load, save, and environment overlays."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator

from bddgov.core.constants import (
    CONFIG_FILENAME,
    DEFAULT_APPS_DIR,
    DEFAULT_FEATURES_SUBDIR,
    DEFAULT_SKIP_DIRS,
    FEATURE_SUFFIX,
)
from bddgov.core.exceptions import ConfigError, ConfigNotFoundError

# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class ScanConfig(BaseModel):
    """Where feature files live and which directories to ignore."""

    repo_root: str = ""  # empty → current working directory
    apps_dir: str = DEFAULT_APPS_DIR
    features_subdir: str = DEFAULT_FEATURES_SUBDIR  # empty → whole app directory
    skip_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))
    feature_suffix: str = FEATURE_SUFFIX

    @field_validator("feature_suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not v.startswith("."):
            raise ValueError("feature_suffix must start with '.' (e.g. '.feature')")
        return v

    @property
    def repo_root_path(self) -> Path:
        return Path(self.repo_root).expanduser() if self.repo_root else Path.cwd()

    @property
    def default_root(self) -> Path:
        return self.repo_root_path / self.apps_dir


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    format: str = "text"  # "text" | "json"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v


class ApiToken(BaseModel):
    """A bearer token accepted by the dashboard API."""

    token: SecretStr
    subject: str = "api"
    roles: list[str] = Field(default_factory=list)

    @field_validator("token")
    @classmethod
    def validate_token_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 16:
            raise ValueError("API tokens must be at least 16 characters long")
        return v

    @field_validator("roles", mode="before")
    @classmethod
    def parse_roles(cls, v: Any) -> Any:
        """Accept both list and comma-separated string."""
        if isinstance(v, str):
            return [r.strip() for r in v.split(",") if r.strip()]
        return v


class DashboardConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8787
    admin_role: str = "ADMIN"
    tokens: list[ApiToken] = Field(default_factory=list)

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (1 <= v <= 65535):
            raise ValueError("port must be between 1 and 65535")
        return v


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class GovernanceConfig(BaseModel):
    """Root bddgov configuration model."""

    model_config = {"extra": "forbid"}

    config_version: int = 1
    scan: ScanConfig = Field(default_factory=ScanConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def _config_file_path() -> Path | None:
    """Explicit BDDGOV_CONFIG, else ./bddgov.toml when present, else None."""
    if env_path := os.environ.get("BDDGOV_CONFIG"):
        return Path(env_path)
    local = Path.cwd() / CONFIG_FILENAME
    return local if local.exists() else None


def load_config(path: Path | str | None = None) -> GovernanceConfig:
    """
    Load GovernanceConfig from a TOML file, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (BDDGOV_*)
      2. Config file (*path*, $BDDGOV_CONFIG, or ./bddgov.toml)
      3. Built-in defaults

    An explicitly named file that does not exist is an error; an absent
    ./bddgov.toml simply means defaults.
    """
    import tomllib

    explicit = path is not None or bool(os.environ.get("BDDGOV_CONFIG"))
    cfg_path = Path(path) if path is not None else _config_file_path()

    data: dict[str, Any] = {}
    if cfg_path is not None:
        if not cfg_path.exists():
            if explicit:
                raise ConfigNotFoundError(f"Config file not found: {cfg_path}")
        else:
            try:
                with open(cfg_path, "rb") as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc

    _apply_env_overrides(data)

    try:
        return GovernanceConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Invalid config at {cfg_path or '<defaults>'}: {exc}") from exc


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay BDDGOV_* environment variables onto parsed TOML (in place)."""

    def _env(name: str) -> str:
        return os.environ.get(name, "")

    if root := _env("BDDGOV_REPO_ROOT"):
        data.setdefault("scan", {})["repo_root"] = root
    if apps_dir := _env("BDDGOV_APPS_DIR"):
        data.setdefault("scan", {})["apps_dir"] = apps_dir
    if "BDDGOV_FEATURES_SUBDIR" in os.environ:
        data.setdefault("scan", {})["features_subdir"] = os.environ["BDDGOV_FEATURES_SUBDIR"]

    if level := _env("BDDGOV_LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = level

    if token := _env("BDDGOV_DASHBOARD_TOKEN"):
        roles = _env("BDDGOV_DASHBOARD_ROLES") or "ADMIN"
        data.setdefault("dashboard", {}).setdefault("tokens", []).append(
            {"token": token, "subject": "env", "roles": roles}
        )


def default_config_data() -> dict[str, Any]:
    """Starter config written by ``bddgov init``."""
    return {
        "config_version": 1,
        "scan": {
            "apps_dir": DEFAULT_APPS_DIR,
            "features_subdir": DEFAULT_FEATURES_SUBDIR,
            "skip_dirs": list(DEFAULT_SKIP_DIRS),
        },
        "logging": {"level": "WARNING", "format": "text"},
        "dashboard": {"host": "127.0.0.1", "port": 8787, "admin_role": "ADMIN"},
    }


def save_config(config_data: dict[str, Any], path: Path) -> Path:
    """Write config dict to a TOML file atomically."""
    import tomli_w

    path.parent.mkdir(parents=True, exist_ok=True)
    config_data.setdefault("config_version", 1)

    tmp_path = path.with_suffix(".tmp")
    try:
        with open(tmp_path, "wb") as f:
            tomli_w.dump(config_data, f)
        tmp_path.replace(path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Cannot write config to {path}: {exc}") from exc

    # May hold dashboard tokens
    path.chmod(0o600)
    return path
