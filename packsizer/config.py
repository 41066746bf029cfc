"""Environment helpers, logger setup and credential building."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, TypeVar

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


def get_string_value_or_default(value: str | None, default: str) -> str:
    """Return ``value`` unless it is empty or None, otherwise ``default``."""
    return value if value else default


def string_to_bool(value: str | None, default: bool) -> bool:
    """Parse a boolean string, falling back to ``default`` when unrecognised."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def check_for_nil(value: Any) -> str:
    """Return ``value`` as a string, or an empty string for None."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def replace_if_not_none(new_value: T | None, old_value: T) -> T:
    """Return ``new_value`` if it was given, otherwise ``old_value``."""
    return old_value if new_value is None else new_value


class _JsonFormatter(logging.Formatter):
    def __init__(self, service: str) -> None:
        super().__init__()
        self._service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": record.levelname.lower(),
            "service": self._service,
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="seconds"
            ),
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry)


@lru_cache(maxsize=None)
def get_logger() -> logging.Logger:
    """Return the process-wide service logger, configured from the environment."""
    service = get_string_value_or_default(os.getenv("SV_SERVICE_NAME"), "api")
    as_json = string_to_bool(os.getenv("LOG_JSON"), False)
    level_name = get_string_value_or_default(os.getenv("LOG_LEVEL"), "info")

    logger = logging.getLogger(service)
    logger.setLevel(_LEVELS.get(level_name.lower(), logging.INFO))
    logger.handlers.clear()
    handler = logging.StreamHandler()
    if as_json:
        handler.setFormatter(_JsonFormatter(service))
    else:
        handler.setFormatter(
            logging.Formatter(
                f"%(asctime)s %(levelname)s [{service}] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


@dataclass(frozen=True)
class FirebaseCredentials:
    """Service-account credentials assembled from environment variables."""

    type: str = ""
    project_id: str = ""
    private_key_id: str = ""
    private_key: str = ""
    client_email: str = ""
    client_id: str = ""
    auth_uri: str = ""
    token_uri: str = ""
    auth_provider_x509_cert_url: str = ""
    client_x509_cert_url: str = ""

    @classmethod
    def from_environment(cls) -> FirebaseCredentials:
        env = os.environ
        return cls(
            type=env.get("FB_TYPE", ""),
            project_id=env.get("FB_PROJECT_ID", ""),
            private_key_id=env.get("FB_PRIVATE_KEY_ID", ""),
            private_key=env.get("FB_PRIVATE_KEY", ""),
            client_email=env.get("FB_CLIENT_EMAIL", ""),
            client_id=env.get("FB_CLIENT_ID", ""),
            auth_uri=env.get("FB_AUTH_URI", ""),
            token_uri=env.get("FB_TOKEN_URI", ""),
            auth_provider_x509_cert_url=env.get("FB_AUTH_PROVIDER_x509_CERT_URL", ""),
            client_x509_cert_url=env.get("FB_CLIENT_x509_CERT_URL", ""),
        )

    def to_json(self) -> bytes:
        """Serialise compactly, escaping HTML-sensitive characters."""
        text = json.dumps(asdict(self), separators=(",", ":"), ensure_ascii=False)
        for char, escape in (
            ("<", "\\u003c"),
            (">", "\\u003e"),
            ("&", "\\u0026"),
            ("\u2028", "\\u2028"),
            ("\u2029", "\\u2029"),
        ):
            text = text.replace(char, escape)
        return text.encode("utf-8")


def build_json_from_environment() -> bytes:
    """Build the credentials JSON document from ``FB_*`` environment variables."""
    return FirebaseCredentials.from_environment().to_json()