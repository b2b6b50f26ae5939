from __future__ import annotations

import logging
import os
from dataclasses import dataclass

SUPPORTED_BACKENDS = ("nacl", "cryptography")


@dataclass
class Settings:
    backend: str
    log_level: str


def get_settings() -> Settings:
    backend = os.getenv("ED25519_KEY_BACKEND", "nacl").strip().lower()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"ED25519_KEY_BACKEND must be one of {', '.join(SUPPORTED_BACKENDS)}, got '{backend}'"
        )

    log_level = os.getenv("ED25519_KEY_LOG_LEVEL", "WARNING").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"ED25519_KEY_LOG_LEVEL must be a logging level name, got '{log_level}'")

    return Settings(backend=backend, log_level=log_level)


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    The library itself only installs a ``NullHandler``; applications that want
    the package's debug output call this once at startup.
    """
    if level is None:
        level = get_settings().log_level
    logger = logging.getLogger("ed25519_verification_key_2020")
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
