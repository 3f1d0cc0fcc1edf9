from __future__ import annotations

from contextvars import ContextVar, Token
import os
import sys

_VERBOSE_LOGGING: ContextVar[bool] = ContextVar(
    "droplink_verbose_logging", default=False
)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def read_bool_env(name: str, default: bool | None = None) -> bool | None:
    raw = (os.environ.get(name) or "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return default


def get_verbose_logging() -> bool:
    return _VERBOSE_LOGGING.get()


def set_verbose_logging(enabled: bool) -> Token[bool]:
    return _VERBOSE_LOGGING.set(bool(enabled))


def reset_verbose_logging(token: Token[bool]) -> None:
    _VERBOSE_LOGGING.reset(token)


def log(area: str, message: str) -> None:
    if get_verbose_logging():
        print(f"[{area}] {message}", file=sys.stderr, flush=True)
