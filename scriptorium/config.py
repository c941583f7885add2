# -*- coding: utf-8 -*-
# @file config.py
# @brief Environment loading and storage configuration
# @author sailing-innocent
# @date 2026-10-19

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_FILES = {
    "dev": ".env.dev",
    "debug": ".env.debug",
    "prod": ".env.prod",
}

DEFAULT_DB_FILENAME = "scriptorium.sqlite"


def load_environment(mode: str, base_dir: Path) -> Optional[Path]:
    """Load ``.env.<mode>`` (or the plain ``.env`` fallback) from base_dir

    Returns:
        The file that was loaded, or None when neither exists
    """
    env_file = ENV_FILES.get(mode, ".env")
    env_path = base_dir / env_file
    if env_path.exists():
        load_dotenv(env_path, encoding="utf-8")
        return env_path

    default_env = base_dir / ".env"
    if default_env.exists():
        load_dotenv(default_env, encoding="utf-8")
        return default_env
    return None


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class StorageConfig:
    """Where the embedded database lives and how long operations may take"""

    db_uri: str
    op_timeout: float = 30.0
    busy_timeout: float = 5.0

    @staticmethod
    def for_path(db_path: Path, **kwargs) -> "StorageConfig":
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return StorageConfig(db_uri=f"sqlite+aiosqlite:///{db_path.as_posix()}", **kwargs)

    @staticmethod
    def from_env() -> "StorageConfig":
        op_timeout = _float_env("SCRIPTORIUM_OP_TIMEOUT", 30.0)
        busy_timeout = _float_env("SCRIPTORIUM_BUSY_TIMEOUT", 5.0)

        db_uri = os.environ.get("SCRIPTORIUM_DB_URI", "").strip()
        if db_uri:
            return StorageConfig(
                db_uri=db_uri, op_timeout=op_timeout, busy_timeout=busy_timeout
            )

        data_dir = os.environ.get("SCRIPTORIUM_DATA_DIR", "").strip() or "data"
        return StorageConfig.for_path(
            Path(data_dir) / DEFAULT_DB_FILENAME,
            op_timeout=op_timeout,
            busy_timeout=busy_timeout,
        )
