from __future__ import annotations
from typing import TypedDict

__all__ = ["Settings", "OptionalSettings", "DEFAULTS", "MINIFIED", "default_settings"]

class Settings(TypedDict):
    minify: bool
    indent_with: str
    generate_source_map: bool

class OptionalSettings(TypedDict, total=False):
    minify: bool
    indent_with: str
    generate_source_map: bool

DEFAULTS: Settings = {
    "minify": False,
    "indent_with": "    ",
    "generate_source_map": False,
}

MINIFIED: OptionalSettings = {
    "minify": True,
    "indent_with": "",
}

def default_settings(origin: OptionalSettings | dict | None = None) -> Settings:
    """Fill in missing keys of `origin` from `DEFAULTS`.

    Unknown keys raise a `KeyError` so that typos in settings are not silently ignored.
    """
    origin = dict(origin or {})
    unknown = set(origin) - set(DEFAULTS)
    if unknown:
        raise KeyError(f"Unknown settings: {', '.join(sorted(unknown))}")
    for key, value in DEFAULTS.items():
        origin[key] = origin.get(key, value)
    return origin  # type: ignore[return-value]
