from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

API_BASE = "https://walletobjects.googleapis.com/walletobjects/v1"
BATCH_URL = "https://walletobjects.googleapis.com/batch"

# Cloud Run secret volume mount
MOUNTED_KEYFILE_PATH = "/key.json/GOOGLE_APPLICATION_CREDENTIALS"


class ConfigError(RuntimeError):
    pass


def _get_env(environ: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    val = environ.get(name)
    return val if val not in (None, "") else default


def _get_int(environ: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = _get_env(environ, name)
    if raw is None:
        return default
    try:
        val = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if val < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {val}")
    return val


def _get_log_level(environ: Mapping[str, str]) -> str:
    level = _get_env(environ, "LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"LOG_LEVEL must be a logging level name, got {level!r}")
    return level


def resolve_keyfile_path(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Priority:
      1) GOOGLE_APPLICATION_CREDENTIALS env var (if it points to a real file)
      2) The mounted volume path
    """
    environ = os.environ if environ is None else environ
    p = _get_env(environ, "GOOGLE_APPLICATION_CREDENTIALS")
    if p and os.path.isfile(p):
        return p

    if os.path.isfile(MOUNTED_KEYFILE_PATH):
        return MOUNTED_KEYFILE_PATH

    raise ConfigError(
        "Service account keyfile not found. "
        "Expected GOOGLE_APPLICATION_CREDENTIALS to point to a file, "
        f"or file present at {MOUNTED_KEYFILE_PATH}."
    )


@dataclass(frozen=True)
class Settings:
    keyfile: str
    issuer_id: str
    origins: List[str] = field(default_factory=lambda: ["www.example.com"])
    api_base: str = API_BASE
    batch_url: str = BATCH_URL
    timeout: int = 30
    jwt_ttl: int = 3600
    log_level: str = "INFO"
    port: int = 8080

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ

        issuer_id = _get_env(environ, "WALLET_ISSUER_ID") or _get_env(environ, "ISSUER_ID")
        if not issuer_id:
            raise ConfigError("Missing required env var: WALLET_ISSUER_ID")

        origins_raw = _get_env(environ, "WALLET_ORIGINS", "www.example.com")
        origins = [o.strip() for o in origins_raw.split(",") if o.strip()]

        return cls(
            keyfile=resolve_keyfile_path(environ),
            issuer_id=issuer_id.strip(),
            origins=origins,
            api_base=_get_env(environ, "WALLET_API_BASE", API_BASE).rstrip("/"),
            batch_url=_get_env(environ, "WALLET_BATCH_URL", BATCH_URL),
            timeout=_get_int(environ, "WALLET_HTTP_TIMEOUT", 30),
            jwt_ttl=_get_int(environ, "WALLET_JWT_TTL", 3600),
            log_level=_get_log_level(environ),
            port=_get_int(environ, "PORT", 8080),
        )
