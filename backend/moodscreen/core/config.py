import os
from dataclasses import dataclass, field
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_UPLOAD_DIR = PROJECT_ROOT / "uploads"
DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def _to_bool(value: str, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _to_list(value: str) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def _resolve_path(value: str, default_path: Path) -> str:
    raw = (value or "").strip()
    if not raw:
        return str(default_path)

    p = Path(raw)
    if p.is_absolute():
        return str(p)
    return str(PROJECT_ROOT / raw)


@dataclass(slots=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "MoodScreen API")
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # "memory" keeps records for the process lifetime only; "sql" uses DATABASE_URL.
    assessment_store: str = os.getenv("ASSESSMENT_STORE", "memory").strip().lower()
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./moodscreen.db")

    upload_dir: str = _resolve_path(os.getenv("UPLOAD_DIR", ""), DEFAULT_UPLOAD_DIR)
    keep_uploads: bool = _to_bool(os.getenv("KEEP_UPLOADS"), True)

    cors_origins: list[str] = field(
        default_factory=lambda: _to_list(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))
    )


settings = Settings()
