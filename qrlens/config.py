# -*- coding: utf-8 -*-
"""
Runtime settings, read from ``QRLENS_*`` environment variables.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .qr_generator import DEFAULT_BORDER, DEFAULT_ECC, DEFAULT_SIZE, MAX_SIZE, normalize_ecc
from .totp import DEFAULT_PERIOD

ENV_PREFIX = "QRLENS_"


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    max_upload_mb: int = 10
    default_period: int = DEFAULT_PERIOD
    qr_size: int = DEFAULT_SIZE
    qr_max_size: int = MAX_SIZE
    qr_border: int = DEFAULT_BORDER
    qr_ecc: str = DEFAULT_ECC

    def flask_config(self) -> Dict[str, Any]:
        return {
            "MAX_CONTENT_LENGTH": self.max_upload_mb * 1024 * 1024,
            "DEBUG": self.debug,
            "QR_DEFAULT_PERIOD": self.default_period,
            "QR_SIZE": self.qr_size,
            "QR_MAX_SIZE": self.qr_max_size,
            "QR_BORDER": self.qr_border,
            "QR_ECC": self.qr_ecc,
        }


def _int(env: Mapping[str, str], key: str, default: int, minimum: int = 0) -> int:
    try:
        value = int(env.get(ENV_PREFIX + key, default))
    except (ValueError, TypeError):
        return default
    return value if value >= minimum else default


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(ENV_PREFIX + key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "t", "yes", "on")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment; malformed values keep their defaults."""
    env = os.environ if env is None else env
    defaults = Settings()
    return Settings(
        host=env.get(ENV_PREFIX + "HOST", defaults.host),
        port=_int(env, "PORT", defaults.port, minimum=1),
        debug=_bool(env, "DEBUG", defaults.debug),
        log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
        max_upload_mb=_int(env, "MAX_UPLOAD_MB", defaults.max_upload_mb, minimum=1),
        default_period=_int(env, "DEFAULT_PERIOD", defaults.default_period, minimum=1),
        qr_size=_int(env, "QR_SIZE", defaults.qr_size, minimum=1),
        qr_max_size=_int(env, "QR_MAX_SIZE", defaults.qr_max_size, minimum=1),
        qr_border=_int(env, "QR_BORDER", defaults.qr_border),
        qr_ecc=normalize_ecc(env.get(ENV_PREFIX + "QR_ECC"), defaults.qr_ecc),
    )
