"""Environment-driven settings for the HTTP service."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from code_analysis.constants import DEFAULT_MAX_DEPTH, DEFAULT_MAX_FILE_SIZE


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Settings:
    db_path: str = "code-intel.db"
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_depth: int = DEFAULT_MAX_DEPTH
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_files: bool = True) -> "Settings":
        """Read settings from the environment.

        When ``load_files`` is set, ``.env`` is loaded first and ``.env.local``
        overrides it. Variables already set in the process win over ``.env``.
        """
        if load_files:
            _ = load_dotenv(dotenv_path=".env")
            _ = load_dotenv(dotenv_path=".env.local", override=True)

        return cls(
            db_path=os.getenv("CODE_INTEL_DB_PATH", cls.db_path),
            max_file_size=_int_env("CODE_INTEL_MAX_FILE_SIZE", cls.max_file_size),
            max_depth=_int_env("CODE_INTEL_MAX_DEPTH", cls.max_depth),
            log_level=os.getenv("CODE_INTEL_LOG_LEVEL", cls.log_level).upper(),
        )
