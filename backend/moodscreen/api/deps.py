from pathlib import Path

from fastapi import Request

from moodscreen.core.config import settings
from moodscreen.db.store import AssessmentStore


def get_store(request: Request) -> AssessmentStore:
    return request.app.state.store


def get_upload_dir() -> Path:
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir
