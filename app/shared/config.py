"""
Process configuration merged from, lowest priority first:
`env.example` (committed placeholders), `env.local` (developer overrides,
never committed) and the process environment.
"""

import os
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger

PROJECT_ROOT = Path(__file__).parent.parent.parent
ENV_FILES = ("env.example", "env.local")


class EnvironConfig:
    """Read-only view over the merged environment, loaded once per process."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._values = cls._load()
        return cls._instance

    @staticmethod
    def _load() -> dict[str, str | None]:
        values: dict[str, str | None] = {}
        for filename in ENV_FILES:
            path = PROJECT_ROOT / filename
            if path.exists():
                values.update(dotenv_values(path))
                logger.info("Loaded environment variables from {}", path)
        values.update(os.environ)
        return values

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)


config = EnvironConfig()
