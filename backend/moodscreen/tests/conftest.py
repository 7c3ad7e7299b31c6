import os
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

os.environ["ASSESSMENT_STORE"] = "memory"
os.environ["KEEP_UPLOADS"] = "1"

from moodscreen.api.deps import get_store, get_upload_dir  # noqa: E402
from moodscreen.db.store import MemoryAssessmentStore  # noqa: E402
from moodscreen.main import app  # noqa: E402


class FixedMeasurementProvider:
    def __init__(self, pitch: float = 200.0, energy: float = 0.3) -> None:
        self.pitch = pitch
        self.energy = energy

    def measure(self, transcript: str, duration_seconds: float) -> tuple[float, float]:
        return self.pitch, self.energy


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def memory_store() -> MemoryAssessmentStore:
    return MemoryAssessmentStore()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
async def client(memory_store: MemoryAssessmentStore, upload_dir: Path) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_upload_dir] = lambda: upload_dir
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
