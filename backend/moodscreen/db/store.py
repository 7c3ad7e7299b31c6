"""
Assessment persistence.

The pipeline only needs get/create/update plus a created-at range query, so
stores are interchangeable: MemoryAssessmentStore for demos and tests,
SqlAssessmentStore for a durable database. Records cross the boundary as
plain dicts keyed by ASSESSMENT_FIELDS.
"""

import asyncio
import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from moodscreen.db.models import ASSESSMENT_FIELDS, MUTABLE_FIELDS, AssessmentRecord
from moodscreen.db.session import build_engine, build_sessionmaker, init_db

logger = logging.getLogger(__name__)


class AssessmentStore(Protocol):
    async def get(self, assessment_id: str) -> dict[str, Any] | None: ...

    async def create(self, initial: dict[str, Any] | None = None) -> dict[str, Any]: ...

    async def update(self, assessment_id: str, fields: dict[str, Any]) -> dict[str, Any] | None: ...

    async def list_by_created_range(self, start: datetime, end: datetime) -> list[dict[str, Any]]: ...


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _writable(fields: dict[str, Any] | None) -> dict[str, Any]:
    return {k: v for k, v in (fields or {}).items() if k in MUTABLE_FIELDS}


class MemoryAssessmentStore:
    """Process-local store; records are lost on restart."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get(self, assessment_id: str) -> dict[str, Any] | None:
        record = self._records.get(assessment_id)
        return copy.deepcopy(record) if record is not None else None

    async def create(self, initial: dict[str, Any] | None = None) -> dict[str, Any]:
        record: dict[str, Any] = {name: None for name in ASSESSMENT_FIELDS}
        record.update(copy.deepcopy(_writable(initial)))
        record["id"] = str(uuid.uuid4())
        record["created_at"] = datetime.now(timezone.utc)
        async with self._lock:
            self._records[record["id"]] = record
        return copy.deepcopy(record)

    async def update(self, assessment_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        async with self._lock:
            existing = self._records.get(assessment_id)
            if existing is None:
                return None
            existing.update(copy.deepcopy(_writable(fields)))
            return copy.deepcopy(existing)

    async def list_by_created_range(self, start: datetime, end: datetime) -> list[dict[str, Any]]:
        lo, hi = _utc(start), _utc(end)
        rows = [r for r in self._records.values() if lo <= r["created_at"] <= hi]
        rows.sort(key=lambda r: r["created_at"])
        return copy.deepcopy(rows)


class SqlAssessmentStore:
    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._sessions: async_sessionmaker[AsyncSession] = build_sessionmaker(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlAssessmentStore":
        return cls(build_engine(database_url))

    async def init(self) -> None:
        await init_db(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()

    @staticmethod
    def _to_dict(row: AssessmentRecord) -> dict[str, Any]:
        data = row.to_dict()
        data["created_at"] = _utc(data["created_at"])
        return data

    async def get(self, assessment_id: str) -> dict[str, Any] | None:
        async with self._sessions() as db:
            row = await db.get(AssessmentRecord, assessment_id)
            return self._to_dict(row) if row is not None else None

    async def create(self, initial: dict[str, Any] | None = None) -> dict[str, Any]:
        async with self._sessions() as db:
            row = AssessmentRecord(created_at=datetime.now(timezone.utc), **_writable(initial))
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return self._to_dict(row)

    async def update(self, assessment_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        async with self._sessions() as db:
            async with db.begin():
                row = await db.get(AssessmentRecord, assessment_id, with_for_update=True)
                if row is None:
                    return None
                for name, value in _writable(fields).items():
                    setattr(row, name, value)
            await db.refresh(row)
            return self._to_dict(row)

    async def list_by_created_range(self, start: datetime, end: datetime) -> list[dict[str, Any]]:
        stmt: Select[tuple[AssessmentRecord]] = (
            select(AssessmentRecord)
            .where(AssessmentRecord.created_at >= _utc(start), AssessmentRecord.created_at <= _utc(end))
            .order_by(AssessmentRecord.created_at)
        )
        async with self._sessions() as db:
            rows = (await db.execute(stmt)).scalars().all()
            return [self._to_dict(row) for row in rows]


def build_store(kind: str, database_url: str) -> MemoryAssessmentStore | SqlAssessmentStore:
    if kind == "sql":
        logger.info("Using SQL assessment store")
        return SqlAssessmentStore.from_url(database_url)
    if kind != "memory":
        raise ValueError(f"Unknown assessment store: {kind!r} (expected 'memory' or 'sql')")
    logger.info("Using in-memory assessment store")
    return MemoryAssessmentStore()
