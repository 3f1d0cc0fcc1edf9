from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Union

import yaml

from .runtime import read_bool_env
from .snippet import SnippetOptions

DEFAULT_CONFIG_NAME = "droplink.yaml"

_KNOWN_KEYS = frozenset(
    {
        "enabled",
        "separator",
        "placeholder_text",
        "placeholder_start_index",
        "insert_as_image",
    }
)


def _load_dotenv() -> None:
    from dotenv import find_dotenv, load_dotenv

    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


def _optional_bool(value: Any, key: str) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    raise ValueError(f"'{key}' must be true, false or null")


@dataclass(frozen=True)
class DropSettings:
    enabled: bool = True
    separator: str | None = None
    placeholder_text: str | None = None
    placeholder_start_index: int | None = None
    insert_as_image: bool | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DropSettings":
        unknown = sorted(set(data) - _KNOWN_KEYS)
        if unknown:
            raise ValueError(f"Unknown drop setting(s): {', '.join(unknown)}")

        start = data.get("placeholder_start_index")
        if start is not None and (
            isinstance(start, bool) or not isinstance(start, int) or start < 0
        ):
            raise ValueError("'placeholder_start_index' must be a non-negative integer")

        enabled = _optional_bool(data.get("enabled", True), "enabled")
        separator = data.get("separator")
        placeholder_text = data.get("placeholder_text")
        return cls(
            enabled=True if enabled is None else enabled,
            separator=None if separator is None else str(separator),
            placeholder_text=None if placeholder_text is None else str(placeholder_text),
            placeholder_start_index=start,
            insert_as_image=_optional_bool(data.get("insert_as_image"), "insert_as_image"),
        )

    def to_options(self) -> SnippetOptions:
        return SnippetOptions(
            placeholder_text=self.placeholder_text,
            placeholder_start_index=self.placeholder_start_index,
            insert_as_image=self.insert_as_image,
            separator=self.separator,
        )


def parse_settings(source: Union[str, Path, IO]) -> dict[str, Any]:
    if isinstance(source, Path):
        with open(source, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    else:
        data = yaml.safe_load(source)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Drop settings must be a YAML mapping")

    # accept both a bare mapping and one nested under "drop:"
    nested = data.get("drop")
    if isinstance(nested, dict) and set(data) == {"drop"}:
        data = nested
    return data


def _apply_env(data: dict[str, Any]) -> dict[str, Any]:
    _load_dotenv()
    merged = dict(data)
    enabled = read_bool_env("DROPLINK_ENABLED")
    if enabled is not None:
        merged["enabled"] = enabled
    separator = os.environ.get("DROPLINK_SEPARATOR")
    if separator is not None:
        merged["separator"] = separator.replace("\\n", "\n").replace("\\t", "\t")
    return merged


def load_settings(path: Union[str, Path, None] = None) -> DropSettings:
    """Load settings from ``path`` (or ``./droplink.yaml``) plus the environment.

    An explicit path must exist; the default file is optional.
    """
    if path is not None:
        data = parse_settings(Path(path))
    else:
        default = Path.cwd() / DEFAULT_CONFIG_NAME
        data = parse_settings(default) if default.is_file() else {}
    return DropSettings.from_dict(_apply_env(data))
