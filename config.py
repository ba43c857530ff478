"""Shared configuration helpers for the MobSF service connection."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from errors import ConfigurationError

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_UPLOAD_TIMEOUT = 300.0

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path.home() / ".config" / "mobsf-mcp" / "config.toml",
)


@dataclass(frozen=True)
class MobSFConfig:
    """Connection settings for the remote MobSF instance."""

    base_url: str
    api_key: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    upload_timeout: float = DEFAULT_UPLOAD_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"MobSFConfig(base_url={self.base_url!r}, api_key='***', "
            f"request_timeout={self.request_timeout}, upload_timeout={self.upload_timeout})"
        )


def _parse_positive_float(raw: Any, fallback: float) -> float:
    """Return a positive float parsed from *raw*, or *fallback* on failure."""

    if raw is None:
        return fallback
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _normalize_base_url(raw: str) -> str:
    url = raw.strip().rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigurationError(f"MOBSF_BASE_URL must be an http(s) URL (got '{raw}')")
    return url


def _load_file_section(path: Optional[Path]) -> Mapping[str, Any]:
    if path is None:
        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.exists():
                path = candidate
                break
        else:
            return {}
    elif not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc

    section = data.get("mobsf", {})
    if not isinstance(section, dict):
        raise ConfigurationError("[mobsf] section must be a table")
    return section


def load_mobsf_config(
    path: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> MobSFConfig:
    """Load MobSF settings from an optional TOML file and environment variables.

    Environment variables win over the file. A missing API key is fatal.
    """

    environ = os.environ if env is None else env
    section = _load_file_section(path)

    base_url = (environ.get("MOBSF_BASE_URL") or "").strip() or str(section.get("base_url") or "")
    api_key = (environ.get("MOBSF_API_KEY") or "").strip() or str(section.get("api_key") or "").strip()

    if not api_key:
        raise ConfigurationError("MOBSF_API_KEY is required but was not provided")

    request_timeout = _parse_positive_float(
        environ.get("MOBSF_REQUEST_TIMEOUT", section.get("request_timeout")),
        DEFAULT_REQUEST_TIMEOUT,
    )
    upload_timeout = _parse_positive_float(
        environ.get("MOBSF_UPLOAD_TIMEOUT", section.get("upload_timeout")),
        DEFAULT_UPLOAD_TIMEOUT,
    )

    return MobSFConfig(
        base_url=_normalize_base_url(base_url or DEFAULT_BASE_URL),
        api_key=api_key,
        request_timeout=request_timeout,
        upload_timeout=upload_timeout,
    )


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_CONFIG_PATHS",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_UPLOAD_TIMEOUT",
    "MobSFConfig",
    "load_mobsf_config",
]
