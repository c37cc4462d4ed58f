"""Typed, layered application configuration with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Mapping, Optional

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
ENV_PREFIX = "PDFENVELOPE_APP_"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "Files": {
        "settings_json": "appsettings.json",
    },
    "Io": {
        "retry_attempts": "3",
        "retry_delay_seconds": "5",
        "compress": "true",
    },
    "Logging": {
        "level": "INFO",
        "run_log_db": "",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class FilesConfig:
    settings_json: Path = Path("appsettings.json")


@dataclass
class IoConfig:
    retry_attempts: int = 3
    retry_delay_seconds: float = 5.0
    compress: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"
    run_log_db: str = ""


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]]) -> None:
    for section, items in source.items():
        target.setdefault(section, {}).update(items)


_TYPES: Dict[str, type] = {"Path": Path, "bool": bool, "int": int, "float": float, "str": str}


def _cast(value: Any, typ: Any) -> Any:
    if isinstance(typ, str):
        typ = _TYPES.get(typ, str)
    if typ is Path:
        return Path(str(value)).expanduser()
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(value)
    if typ is float:
        return float(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, field.type)
    return cls(**kwargs)


def _env_overlays(environ: Mapping[str, str]) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path(environ: Mapping[str, str]) -> Path:
    if os.name == "nt":
        appdata = environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "PdfEnvelope" / "config.ini"
    return Path(environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "pdf-envelope" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(self, *, environ: Optional[Mapping[str, str]] = None,
                 defaults_ini: Path = DEFAULTS_INI,
                 user_ini: Optional[Path] = None) -> None:
        self._lock = RLock()
        self._environ = os.environ if environ is None else environ
        self._defaults_ini = defaults_ini
        self._user_ini = user_ini
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS)

            # Layer 1: defaults.ini
            if self._defaults_ini.exists():
                cp = configparser.ConfigParser()
                cp.read(self._defaults_ini, encoding="utf-8")
                _apply(merged, _cp_to_dict(cp))

            # Layer 2: environment variables
            env = _env_overlays(self._environ)
            _apply(merged, env)

            # Layer 3: user overrides
            user_ini = self._user_ini or _user_config_path(self._environ)
            if user_ini.exists():
                cp = configparser.ConfigParser()
                cp.read(user_ini, encoding="utf-8")
                _apply(merged, _cp_to_dict(cp))

            self.files = _build_dataclass(FilesConfig, merged.get("Files", {}))
            self.io = _build_dataclass(IoConfig, merged.get("Io", {}))
            self.logging = _build_dataclass(LoggingConfig, merged.get("Logging", {}))
