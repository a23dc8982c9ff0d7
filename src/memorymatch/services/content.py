from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from memorymatch.engine.types import Theme, ThemeCatalog, Token


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_list(obj: Mapping[str, object], key: str) -> list[object]:
    v = obj.get(key)
    if not isinstance(v, list):
        raise ContentError(f"Expected list for {key}")
    return v


def _parse_theme(raw: Mapping[str, object]) -> Theme:
    theme_id = _require_str(raw, "id")
    tokens: list[Token] = []
    seen: set[str] = set()
    for item in _require_list(raw, "tokens"):
        if not isinstance(item, dict):
            continue
        kind = _require_str(item, "kind")
        if kind in seen:
            raise ContentError(f"Duplicate token kind {kind!r} in theme {theme_id!r}")
        seen.add(kind)
        tokens.append(Token(kind=kind, display_value=_require_str(item, "display")))
    return Theme(id=theme_id, label=_require_str(raw, "label"), tokens=tuple(tokens))


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_themes(self) -> ThemeCatalog:
        path = self._data_dir / "themes.json"
        schema = _load_schema(self._schema_dir / "themes.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("themes.json must be an object")

        themes: dict[str, Theme] = {}
        for item in _require_list(raw, "themes"):
            if not isinstance(item, dict):
                continue
            theme = _parse_theme(item)
            if theme.id in themes:
                raise ContentError(f"Duplicate theme id {theme.id!r}")
            themes[theme.id] = theme

        default_theme = raw.get("default_theme")
        if default_theme is not None and default_theme not in themes:
            raise ContentError(f"default_theme {default_theme!r} is not a known theme")
        return ThemeCatalog(themes=themes, default_theme=default_theme)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_themes()
