"""Simulator configuration management."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_PERSISTED = ("measurement_mode", "default_shots", "max_unitary_qubits",
              "max_qubits", "tolerance", "log_level")


@dataclass
class SimulatorConfig:
    """Persistent simulator configuration."""
    measurement_mode: str = "joint"
    default_shots: int = 0
    max_unitary_qubits: int = 10
    max_qubits: int = 16
    tolerance: float = 1e-9
    log_level: str = "WARNING"

    _config_dir: Path = field(
        default_factory=lambda: Path.home() / ".qcns",
        repr=False)

    @property
    def config_path(self) -> Path:
        return self._config_dir / "config.json"

    def to_dict(self) -> dict:
        return {key: getattr(self, key) for key in _PERSISTED}

    def save(self):
        self._config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, config_dir: Path | str | None = None) -> SimulatorConfig:
        """Read the config file; missing or unreadable files give defaults."""
        config = cls() if config_dir is None else cls(_config_dir=Path(config_dir))
        if config.config_path.exists():
            try:
                with open(config.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Ignoring unreadable config %s: %s", config.config_path, exc)
                return config
            if not isinstance(data, dict):
                logger.warning("Ignoring config %s: expected a JSON object", config.config_path)
                return config
            for key, value in data.items():
                if key in _PERSISTED:
                    setattr(config, key, value)
                else:
                    logger.debug("Unknown config key %r ignored", key)
        return config

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(str(self.log_level).upper())
        return level if isinstance(level, int) else logging.WARNING
