"""Runtime configuration and logging bootstrap for picproxy."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence
from urllib.parse import urlparse

from .env_parser import load_env_file

_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_RUNTIME_CONFIG: Optional["AppConfig"] = None
_LOGGING_READY = False


@dataclass(frozen=True)
class AppConfig:
    public_origin: Optional[str]
    log_level: str

    @property
    def has_public_origin(self) -> bool:
        return bool(self.public_origin)


def _normalize_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    return text if text else None


def _normalize_log_level(value: Optional[str]) -> str:
    text = (value or "INFO").strip().upper()
    level = getattr(logging, text, None)
    if isinstance(level, int):
        return text
    print(f"[config] invalid LOG_LEVEL '{value}', fallback to INFO", file=sys.stderr)
    return "INFO"


def _normalize_origin(value: Optional[str]) -> Optional[str]:
    text = _normalize_optional(value)
    if text is None:
        return None
    parsed = urlparse(text)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        print(f"[config] PUBLIC_ORIGIN must start with http:// or https://: '{value}', ignored", file=sys.stderr)
        return None
    if parsed.path.strip("/") or parsed.params or parsed.query or parsed.fragment:
        print(
            f"[config] PUBLIC_ORIGIN must be scheme and host only, without path, query or fragment: '{value}', ignored",
            file=sys.stderr,
        )
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="picproxy MCP Server")
    parser.add_argument(
        "--public-origin",
        type=str,
        default=None,
        help="Origin prepended to proxy paths, e.g. https://app.example.com",
    )
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG/INFO/WARNING/ERROR/CRITICAL")
    return parser


def _pick(
    cli_value: Optional[str],
    env: Mapping[str, str],
    env_key: str,
    default: Optional[str] = None,
) -> Optional[str]:
    if cli_value is not None:
        return cli_value
    return env.get(env_key, default)


def build_config(
    argv: Optional[Sequence[str]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Build AppConfig from argv and environment variables."""

    env_map: Mapping[str, str] = env if env is not None else os.environ
    args, _ = _build_parser().parse_known_args(list(argv) if argv is not None else None)

    return AppConfig(
        public_origin=_normalize_origin(_pick(args.public_origin, env_map, "PUBLIC_ORIGIN")),
        log_level=_normalize_log_level(_pick(args.log_level, env_map, "LOG_LEVEL", "INFO")),
    )


def _make_handler(stream: object) -> logging.Handler:
    handler = logging.StreamHandler(stream)  # type: ignore[arg-type]
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler._picproxy_handler = True  # type: ignore[attr-defined]
    return handler


def setup_logging(level_name: str, stream: Optional[object] = None) -> None:
    """Initialize root logging once and keep it idempotent."""

    global _LOGGING_READY

    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()

    if stream is None:
        stream = sys.stderr

    if not _LOGGING_READY:
        root.handlers = []
        root.addHandler(_make_handler(stream))
    elif not any(getattr(h, "_picproxy_handler", False) for h in root.handlers):
        root.addHandler(_make_handler(stream))

    root.setLevel(level)
    for handler in root.handlers:
        if getattr(handler, "_picproxy_handler", False):
            handler.setLevel(level)

    _LOGGING_READY = True


def init_runtime(argv: Optional[Sequence[str]] = None) -> AppConfig:
    """Load .env, build runtime config, and setup logging."""

    global _RUNTIME_CONFIG

    load_env_file(_ENV_PATH)
    cfg = build_config(argv=argv, env=os.environ)
    setup_logging(cfg.log_level)
    _RUNTIME_CONFIG = cfg

    logger = logging.getLogger(__name__)
    logger.debug("[DEBUG] argv=%s", list(argv) if argv is not None else sys.argv)
    logger.debug("[DEBUG] public_origin=%s log_level=%s", cfg.public_origin, cfg.log_level)
    return cfg


def get_config() -> AppConfig:
    """Return runtime config; requires init_runtime() first."""

    if _RUNTIME_CONFIG is None:
        raise RuntimeError("Runtime config is not initialized. Call init_runtime() before using picproxy modules.")
    return _RUNTIME_CONFIG


def peek_config() -> Optional[AppConfig]:
    """Return runtime config, or None when init_runtime() has not run."""

    return _RUNTIME_CONFIG


def _reset_runtime_for_tests() -> None:
    """Reset runtime globals for isolated tests."""

    global _RUNTIME_CONFIG, _LOGGING_READY
    _RUNTIME_CONFIG = None
    _LOGGING_READY = False
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not getattr(h, "_picproxy_handler", False)]


__all__ = [
    "AppConfig",
    "build_config",
    "get_config",
    "init_runtime",
    "peek_config",
    "setup_logging",
]
