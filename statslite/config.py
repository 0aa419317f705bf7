"""
Config Store

Persists the opt-out flag and the anonymous unique ID in a small
properties file next to the host's other configuration.
"""

import os
import tempfile
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import ConfigIOError

DEFAULT_CONFIG_FILE = "statslite.properties"

HEADER = "StatsLite configuration, set opt-out to true to stop contacting http://mcstats.org"

OPT_OUT_KEY = "opt-out"
GUID_KEY = "guid"


@dataclass(frozen=True)
class Config:
    """Snapshot of the persisted configuration"""

    opt_out: bool = False
    unique_id: Optional[str] = None


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse Java-style properties text

    Args:
        text: File contents

    Returns:
        Mapping of keys to raw string values (later keys win)
    """
    properties = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue

        # First '=' or ':' separates key from value
        positions = [pos for pos in (line.find("="), line.find(":")) if pos != -1]
        if positions:
            split_at = min(positions)
            key, value = line[:split_at], line[split_at + 1:]
        else:
            key, value = line, ""
        properties[key.strip()] = value.strip()
    return properties


def _parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() == "true"


class ConfigStore:
    """File-backed store for the opt-out flag and unique ID"""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @classmethod
    def in_directory(cls, config_dir: Union[str, Path]) -> "ConfigStore":
        """Create a store for the default file name inside a config directory"""
        return cls(Path(config_dir) / DEFAULT_CONFIG_FILE)

    @property
    def path(self) -> Path:
        return self._path

    def reload(self) -> Config:
        """
        Read the configuration, creating it on first use

        A missing file is created with opt-out disabled and a new random
        unique ID. Unparsable opt-out values read as False.

        Returns:
            Current configuration snapshot

        Raises:
            ConfigIOError: If the file cannot be read or created
        """
        if not self._path.exists():
            config = Config(opt_out=False, unique_id=str(uuid.uuid4()))
            self._write(config)
            return config

        try:
            text = self._path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ConfigIOError(f"Failed to read {self._path}: {e}") from e

        properties = parse_properties(text)
        return Config(
            opt_out=_parse_bool(properties.get(OPT_OUT_KEY)),
            unique_id=properties.get(GUID_KEY),
        )

    def set_opt_out(self, opt_out: bool) -> Config:
        """
        Persist a new opt-out value, keeping the existing unique ID

        Args:
            opt_out: True to stop all statistics submission

        Returns:
            Updated configuration snapshot
        """
        config = replace(self.reload(), opt_out=opt_out)
        self._write(config)
        return config

    def _write(self, config: Config):
        lines = [
            f"#{HEADER}",
            f"#{datetime.now().strftime('%a %b %d %H:%M:%S %Y')}",
            f"{OPT_OUT_KEY}={'true' if config.opt_out else 'false'}",
        ]
        if config.unique_id is not None:
            lines.append(f"{GUID_KEY}={config.unique_id}")

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Readers must never see a truncated file
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write("\n".join(lines) + "\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise ConfigIOError(f"Failed to write {self._path}: {e}") from e
