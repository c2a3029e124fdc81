import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_str(key: str, default: Optional[str]) -> Optional[str]:
    """Return an environment variable, treating blank values as unset."""
    val = os.environ.get(key)
    if val is None or not val.strip():
        return default
    return val.strip()


def _env_int(key: str, default: int) -> int:
    val = _env_str(key, None)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to an integer.")


def _env_float(key: str, default: float) -> float:
    val = _env_str(key, None)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to a number.")


def _env_list(key: str, default: List[str]) -> List[str]:
    """Comma separated list; empty items are dropped."""
    val = _env_str(key, None)
    if val is None:
        return list(default)
    return [item.strip() for item in val.split(",") if item.strip()]


STORAGE_BACKENDS = ("sql", "memory")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read once at startup."""

    google_api_key: Optional[str] = None
    generation_model: str = "gemini-2.0-flash-lite"
    max_output_tokens: int = 500
    request_timeout_seconds: float = 60.0
    storage_backend: str = "sql"
    database_url: str = "sqlite:///./data/experiments.db"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got '{self.storage_backend}'."
            )
        if self.max_output_tokens < 1:
            raise ValueError("MAX_OUTPUT_TOKENS must be at least 1.")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call load_dotenv() first)."""
        defaults = cls()
        return cls(
            google_api_key=_env_str("GOOGLE_API_KEY", None),
            generation_model=_env_str("GENERATION_MODEL", defaults.generation_model),
            max_output_tokens=_env_int("MAX_OUTPUT_TOKENS", defaults.max_output_tokens),
            request_timeout_seconds=_env_float("REQUEST_TIMEOUT_SECONDS", defaults.request_timeout_seconds),
            storage_backend=_env_str("STORAGE_BACKEND", defaults.storage_backend).lower(),
            database_url=_env_str("DATABASE_URL", defaults.database_url),
            log_level=_env_str("LOG_LEVEL", defaults.log_level).upper(),
            cors_origins=_env_list("CORS_ORIGINS", defaults.cors_origins),
        )
