# asa_cli/config/app_config.py
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from asa_cli.http.errors import ConfigError

logger = logging.getLogger(__name__)

# Load .env from the working tree; real environment variables still win.
load_dotenv(find_dotenv(usecwd=True), override=False)

BASE_URL = "https://api.searchads.apple.com/api/v5"
TOKEN_URL = "https://appleid.apple.com/auth/oauth2/token"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "asa-cli" / "config.json"

# Fields a profile may carry; anything else in the file is ignored.
PROFILE_FIELDS = (
    "client_id",
    "team_id",
    "key_id",
    "org_id",
    "private_key_path",
    "client_secret",
    "currency",
    "base_url",
)


class Settings(BaseSettings):
    """Credentials and endpoints for one profile, overridable via ASA_* env vars."""

    client_id: str = ""
    team_id: str = ""
    key_id: str = ""
    org_id: str = ""
    private_key_path: str = ""
    # pre-built client secret JWT; when set no private key is needed
    client_secret: str = ""
    currency: str = "USD"

    base_url: str = BASE_URL
    token_url: str = TOKEN_URL
    timeout: float = DEFAULT_TIMEOUT

    model_config = SettingsConfigDict(
        env_prefix="ASA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def config_path() -> Path:
    raw = os.getenv("ASA_CONFIG_PATH")
    return Path(raw).expanduser() if raw else DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    p = path or config_path()
    if not p.exists():
        return {"profiles": {}}
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"reading config {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {p} must contain a JSON object")
    data.setdefault("profiles", {})
    return data


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> Path:
    p = path or config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    try:
        os.chmod(p, 0o600)
    except OSError:
        logger.debug("could not chmod %s", p)
    return p


def resolve_settings(
    profile: Optional[str] = None, path: Optional[Path] = None
) -> Settings:
    """
    Merge the named profile from the config file with ASA_* environment
    variables. Environment wins over the file.
    """
    cfg = load_config(path)
    name = profile or os.getenv("ASA_PROFILE") or cfg.get("default_profile") or "default"
    profiles = cfg.get("profiles") or {}
    if profile and profile not in profiles:
        raise ConfigError(f"profile '{profile}' not found in {path or config_path()}")

    values = {
        k: v for k, v in (profiles.get(name) or {}).items() if k in PROFILE_FIELDS
    }
    # env vars override file values, so only pass file values for unset envs
    file_values = {
        k: (str(v) if k == "org_id" else v)
        for k, v in values.items()
        if os.getenv(f"ASA_{k.upper()}") is None
    }
    try:
        settings = Settings(**file_values)
    except ValidationError as e:
        raise ConfigError(f"invalid profile '{name}': {e}") from e
    logger.debug("resolved profile=%s org_id=%s", name, settings.org_id or "-")
    return settings


def validate_credentials(settings: Settings) -> None:
    missing = [
        name
        for name in ("client_id", "org_id")
        if not getattr(settings, name)
    ]
    if not settings.client_secret:
        missing += [
            name
            for name in ("team_id", "key_id", "private_key_path")
            if not getattr(settings, name)
        ]
    if missing:
        raise ConfigError(
            "missing credentials: "
            + ", ".join(missing)
            + " (set them in the config profile or as ASA_* environment variables)"
        )
