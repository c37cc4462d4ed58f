"""
EnvelopeSettingsRepository
--------------------------
Loads EnvelopeSettings from a JSON settings document (appsettings.json).

Layers (later wins):
    0) dataclass defaults
    1) "PdfEnvelope" section of the JSON file (whole document if missing)
    2) environment variables PDFENVELOPE_<SECTION>__<KEY>
       (root keys use the section SETTINGS, e.g. PDFENVELOPE_SETTINGS__PAGENUMBEROFFSET)

Key matching ignores case, "_" and "-", so "CoverPage", "coverPage" and
"cover_page" are the same key. Header/footer slots also accept the
"TextLeft1" spelling.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..exceptions.errors import SettingsError
from ..models.envelope_settings import CoverPage, EnvelopeSettings, TextBand

logger = logging.getLogger(__name__)

ENV_PREFIX = "PDFENVELOPE_"
ROOT_ENV_SECTION = "settings"
# reserved for the application config (core.config.config_service)
_APP_ENV_PREFIX = "PDFENVELOPE_APP_"

_SECTION_FIELDS = {
    "coverpage": "cover_page",
    "pageheader": "page_header",
    "header": "page_header",
    "pagefooter": "page_footer",
    "footer": "page_footer",
}


def _norm(key: str) -> str:
    return key.replace("_", "").replace("-", "").lower()


def _cast(value: Any, typ: Any, where: str) -> Any:
    typ = typ if isinstance(typ, str) else getattr(typ, "__name__", str(typ))
    if typ == "bool":
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ == "int":
        if isinstance(value, bool):
            raise SettingsError(f"{where}: expected an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as ex:
            raise SettingsError(f"{where}: expected an integer, got {value!r}") from ex
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise SettingsError(f"{where}: expected a text, got {type(value).__name__}")
    return str(value)


def _build(cls: type, data: Mapping[str, Any], where: str, *, strip_text_prefix: bool = False) -> Any:
    by_norm: Dict[str, Any] = {}
    for key, value in data.items():
        nk = _norm(str(key))
        if strip_text_prefix and nk.startswith("text"):
            nk = nk[len("text"):]
        by_norm[nk] = value

    kwargs = {}
    for f in fields(cls):
        nk = _norm(f.name)
        if nk in by_norm:
            kwargs[f.name] = _cast(by_norm[nk], f.type, f"{where}.{f.name}")
    return cls(**kwargs)


def _merge(target: Dict[str, Any], source: Mapping[str, Any]) -> None:
    """Deep merge by normalised key."""
    index = {_norm(k): k for k in target}
    for key, value in source.items():
        existing = index.get(_norm(key))
        if existing is None:
            target[key] = value
            index[_norm(key)] = key
        elif isinstance(value, Mapping) and isinstance(target[existing], dict):
            _merge(target[existing], value)
        else:
            target[existing] = value


def _env_overlays(environ: Mapping[str, str]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX) or env_key.startswith(_APP_ENV_PREFIX):
            continue
        parts = env_key[len(ENV_PREFIX):].split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        if _norm(section) == ROOT_ENV_SECTION:
            result[key] = value
        else:
            result.setdefault(section, {})[key] = value
    return result


class EnvelopeSettingsRepository:
    """Reads the settings document; never writes it."""

    SECTION = "PdfEnvelope"

    def __init__(self, path: Optional[Path] = None, *,
                 environ: Optional[Mapping[str, str]] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._environ = os.environ if environ is None else environ

    # --- Public API ---------------------------------------------------------

    def load(self) -> EnvelopeSettings:
        raw = self._read_section()
        _merge(raw, _env_overlays(self._environ))
        return self.from_mapping(raw)

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> EnvelopeSettings:
        """Builds EnvelopeSettings from a (possibly partial) mapping."""
        sections: Dict[str, Mapping[str, Any]] = {}
        root: Dict[str, Any] = {}
        for key, value in data.items():
            field_name = _SECTION_FIELDS.get(_norm(str(key)))
            if field_name is None:
                root[key] = value
                continue
            if not isinstance(value, Mapping):
                raise SettingsError(f"'{key}' must be an object")
            sections[field_name] = value

        base = _build(EnvelopeSettings, {
            k: v for k, v in root.items() if not isinstance(v, Mapping)
        }, "PdfEnvelope")
        return EnvelopeSettings(
            cover_page=_build(CoverPage, sections.get("cover_page", {}), "CoverPage"),
            page_header=_build(TextBand, sections.get("page_header", {}), "PageHeader",
                               strip_text_prefix=True),
            page_footer=_build(TextBand, sections.get("page_footer", {}), "PageFooter",
                               strip_text_prefix=True),
            page_number_offset=base.page_number_offset,
            remove_annotations_other_than_links=base.remove_annotations_other_than_links,
        )

    # --- Internal helpers ---------------------------------------------------

    def _read_section(self) -> Dict[str, Any]:
        if self.path is None:
            return {}
        if not self.path.is_file():
            logger.warning("Settings file not found: %s (using defaults)", self.path)
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8-sig"))
        except (OSError, ValueError) as ex:
            raise SettingsError(f"Settings file {self.path} could not be read: {ex}") from ex
        if not isinstance(document, dict):
            raise SettingsError(f"Settings file {self.path} must contain a JSON object")

        for key, value in document.items():
            if _norm(key) == _norm(self.SECTION):
                if not isinstance(value, dict):
                    raise SettingsError(f"'{key}' section must be an object")
                return dict(value)
        return dict(document)
