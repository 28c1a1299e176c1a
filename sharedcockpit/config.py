"""Persistent user settings stored as JSON."""

import json
from dataclasses import asdict, dataclass, fields


class ConfigLoadError(Exception):
    """The configuration file could not be read, parsed or written."""


_UINT_LIMITS = {
    "update_rate": 0xFFFF,
    "port": 0xFFFF,
    "conn_timeout": 2**64 - 1,
}


@dataclass
class Config:
    """User settings."""

    update_rate: int = 30
    conn_timeout: int = 3
    check_for_betas: bool = False
    port: int = 25071
    ip: str = ""
    name: str = ""
    ui_dark_theme: bool = True
    streamer_mode: bool = False
    use_upnp: bool = True
    start_observer: bool = False

    def write_to_file(self, path):
        """Write the settings as indented JSON."""
        text = json.dumps(asdict(self), indent=2)
        try:
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as e:
            raise ConfigLoadError(str(e)) from e

    @classmethod
    def read_from_file(cls, path):
        """Load settings; every field must be present with the right type."""
        try:
            with open(path, encoding="utf-8") as handle:
                raw = json.load(handle)
        except OSError as e:
            raise ConfigLoadError(str(e)) from e
        except ValueError as e:
            raise ConfigLoadError(str(e)) from e
        return cls._from_mapping(raw)

    @classmethod
    def _from_mapping(cls, raw):
        if not isinstance(raw, dict):
            raise ConfigLoadError("expected a JSON object")
        values = {}
        for field in fields(cls):
            if field.name not in raw:
                raise ConfigLoadError(f"missing field `{field.name}`")
            value = raw[field.name]
            if field.type is bool:
                valid = isinstance(value, bool)
            elif field.type is int:
                valid = (
                    isinstance(value, int)
                    and not isinstance(value, bool)
                    and 0 <= value <= _UINT_LIMITS[field.name]
                )
            else:
                valid = isinstance(value, str)
            if not valid:
                raise ConfigLoadError(f"invalid value for `{field.name}`: {value!r}")
            values[field.name] = value
        return cls(**values)

    def to_json(self):
        """Compact JSON with keys in sorted order."""
        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))