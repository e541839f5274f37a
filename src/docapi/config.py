from __future__ import annotations

import os
from pathlib import Path

import chz
from dotenv import load_dotenv


def _env_str(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name, None)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name, None)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


class DocapiConfig:
    """Process-wide settings, read from ``DOCAPI_*`` environment variables."""

    def __init__(self) -> None:
        self.reload()

    def reload(self) -> None:
        """Re-read every setting from the environment."""
        self.endpoint: str | None = _env_str("DOCAPI_ENDPOINT", None)
        self.token: str | None = _env_str("DOCAPI_TOKEN", None)
        self.keyspace: str = _env_str("DOCAPI_KEYSPACE", "default_keyspace") or ""
        self.api_path: str = _env_str("DOCAPI_API_PATH", "api/json/v1") or ""
        self.timeout_sec: float = _env_float("DOCAPI_TIMEOUT_SEC", 30.0)
        self.page_size: int = _env_int("DOCAPI_PAGE_SIZE", 20)
        self.insert_chunk_size: int = _env_int("DOCAPI_INSERT_CHUNK_SIZE", 50)
        self.insert_concurrency: int = _env_int("DOCAPI_INSERT_CONCURRENCY", 1)
        self.log_level: str = (
            _env_str("DOCAPI_LOG_LEVEL", "WARNING") or "WARNING"
        ).upper()


DOCAPI_CONFIG = DocapiConfig()


def load_env(path: Path | str | None = None, *, override: bool = False) -> bool:
    """Load a ``.env`` file and refresh ``DOCAPI_CONFIG`` from the environment.

    Returns whether a file was found and loaded.
    """
    loaded = load_dotenv(path, override=override)
    DOCAPI_CONFIG.reload()
    return loaded


@chz.chz
class ClientOptions:
    """Immutable per-client options; defaults come from ``DOCAPI_CONFIG``."""

    endpoint: str
    token: str | None = None
    keyspace: str = "default_keyspace"
    api_path: str = "api/json/v1"
    timeout_sec: float = 30.0
    insert_chunk_size: int = 50
    insert_concurrency: int = 1

    @classmethod
    def from_config(cls, **overrides: object) -> ClientOptions:
        endpoint = overrides.pop("endpoint", DOCAPI_CONFIG.endpoint)
        if not endpoint:
            raise ValueError(
                "no endpoint configured; pass endpoint= or set DOCAPI_ENDPOINT"
            )
        values: dict[str, object] = {
            "token": DOCAPI_CONFIG.token,
            "keyspace": DOCAPI_CONFIG.keyspace,
            "api_path": DOCAPI_CONFIG.api_path,
            "timeout_sec": DOCAPI_CONFIG.timeout_sec,
            "insert_chunk_size": DOCAPI_CONFIG.insert_chunk_size,
            "insert_concurrency": DOCAPI_CONFIG.insert_concurrency,
        }
        values.update(overrides)
        return cls(endpoint=endpoint, **values)

    def base_url(self) -> str:
        return "/".join(
            part.strip("/") for part in (self.endpoint, self.api_path, self.keyspace)
        )


__all__ = ["DOCAPI_CONFIG", "ClientOptions", "DocapiConfig", "load_env"]
