"""Durable async store for generation records.

Records live in a single SQLite table accessed through SQLAlchemy's asyncio
extension. Writes are serialised per store and each runs in its own
transaction; reads open their own transaction and may run side by side.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from types import TracebackType
from typing import Sequence

from sqlalchemy import delete as sql_delete
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.sql import Executable

from polygon_workspace.common.errors import StorageReadError, StorageWriteError
from polygon_workspace.common.fs import ensure_dir
from polygon_workspace.common.logging import log_event, log_failure
from polygon_workspace.common.models import (
    GenerationRecord,
    GenerationRecordInput,
    MeanResult,
    points_from_payload,
    points_to_payload,
)
from polygon_workspace.common.time_utils import epoch_millis
from polygon_workspace.store.tables import Base, GenerationRow

logger = logging.getLogger(__name__)


def _to_record(row: GenerationRow) -> GenerationRecord:
    return GenerationRecord(
        id=row.id,
        external_ref=row.external_ref,
        job_code=row.job_code,
        mean=MeanResult.from_dict(row.mean),
        points=points_from_payload(row.points),
        editable_code=row.editable_code,
        timestamp=row.timestamp,
        attachment=row.attachment,
    )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class GenerationStore:
    def __init__(
        self,
        path: Path | str,
        *,
        echo: bool = False,
        event_logger: logging.Logger | None = None,
    ) -> None:
        self.path = Path(path)
        self.url = f"sqlite+aiosqlite:///{self.path}"
        self.echo = echo
        self.logger = event_logger or logger
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None
        self._open_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._session_maker is not None

    async def open(self) -> "GenerationStore":
        if self._session_maker is not None:
            return self

        async with self._open_lock:
            # Another task may have finished opening while this one waited.
            if self._session_maker is not None:
                return self

            started = time.monotonic()
            engine = create_async_engine(self.url, echo=self.echo)
            try:
                ensure_dir(self.path.parent)
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            except (SQLAlchemyError, OSError) as exc:
                await engine.dispose()
                log_failure(
                    self.logger,
                    f"failed to open generation store at {self.path}",
                    operation="open",
                    event="STORE_OPEN_FAIL",
                    status="error",
                    error_code=StorageWriteError.error_code,
                )
                raise StorageWriteError(f"Unable to open generation store at {self.path}") from exc

            self._engine = engine
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            log_event(
                self.logger,
                "generation store open",
                operation="open",
                event="STORE_OPEN",
                status="ok",
                duration_ms=_elapsed_ms(started),
            )
        return self

    async def close(self) -> None:
        async with self._open_lock:
            if self._engine is not None:
                await self._engine.dispose()
            self._engine = None
            self._session_maker = None

    async def __aenter__(self) -> "GenerationStore":
        return await self.open()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _sessions(self) -> async_sessionmaker[AsyncSession]:
        await self.open()
        assert self._session_maker is not None
        return self._session_maker

    async def save(self, record: GenerationRecordInput) -> int:
        sessions = await self._sessions()
        # A cancelled caller must not abandon the transaction half way.
        return await asyncio.shield(self._save(sessions, record))

    async def _save(self, sessions: async_sessionmaker[AsyncSession], record: GenerationRecordInput) -> int:
        async with self._write_lock:
            started = time.monotonic()
            row = GenerationRow(
                external_ref=record.external_ref,
                job_code=record.job_code,
                mean=record.mean.to_dict(),
                points=points_to_payload(record.points),
                editable_code=record.editable_code,
                timestamp=epoch_millis(),
                attachment=record.attachment,
            )
            try:
                async with sessions() as session:
                    async with session.begin():
                        session.add(row)
                        await session.flush()
                        record_id = row.id
            except SQLAlchemyError as exc:
                log_failure(
                    self.logger,
                    f"failed to save generation for {record.external_ref}",
                    operation="save",
                    external_ref=record.external_ref,
                    event="STORE_WRITE_FAIL",
                    status="error",
                    error_code=StorageWriteError.error_code,
                )
                raise StorageWriteError(f"Failed to save generation for {record.external_ref}") from exc

        log_event(
            self.logger,
            "generation saved",
            operation="save",
            record_id=record_id,
            external_ref=record.external_ref,
            event="RECORD_SAVED",
            status="ok",
            duration_ms=_elapsed_ms(started),
            points_in=len(record.points),
        )
        return record_id

    async def _write(self, operation: str, statement: Executable, *, event: str, record_id: int | None = None) -> int:
        sessions = await self._sessions()
        async with self._write_lock:
            started = time.monotonic()
            try:
                async with sessions() as session:
                    async with session.begin():
                        result = await session.execute(statement)
                        affected = result.rowcount
            except SQLAlchemyError as exc:
                log_failure(
                    self.logger,
                    f"generation store {operation} failed",
                    operation=operation,
                    record_id=record_id,
                    event="STORE_WRITE_FAIL",
                    status="error",
                    error_code=StorageWriteError.error_code,
                )
                raise StorageWriteError(f"Generation store {operation} failed") from exc

        log_event(
            self.logger,
            f"generation store {operation}",
            operation=operation,
            record_id=record_id,
            event=event,
            status="ok",
            duration_ms=_elapsed_ms(started),
        )
        return affected

    async def delete(self, record_id: int) -> None:
        statement = sql_delete(GenerationRow).where(GenerationRow.id == record_id)
        await self._write("delete", statement, event="RECORD_DELETED", record_id=record_id)

    async def clear(self) -> None:
        await self._write("clear", sql_delete(GenerationRow), event="STORE_CLEARED")

    async def _read(self, operation: str, statement: Executable) -> Sequence[GenerationRow]:
        sessions = await self._sessions()
        try:
            async with sessions() as session:
                async with session.begin():
                    result = await session.execute(statement)
                    return result.scalars().all()
        except SQLAlchemyError as exc:
            log_failure(
                self.logger,
                f"generation store {operation} failed",
                operation=operation,
                event="STORE_READ_FAIL",
                status="error",
                error_code=StorageReadError.error_code,
            )
            raise StorageReadError(f"Generation store {operation} failed") from exc

    async def get_all(self) -> list[GenerationRecord]:
        rows = await self._read("get_all", select(GenerationRow).order_by(GenerationRow.id))
        return [_to_record(row) for row in rows]

    async def get_by_id(self, record_id: int) -> GenerationRecord | None:
        rows = await self._read("get_by_id", select(GenerationRow).where(GenerationRow.id == record_id))
        if not rows:
            return None
        return _to_record(rows[0])

    async def get_by_external_ref(self, external_ref: str) -> list[GenerationRecord]:
        statement = (
            select(GenerationRow)
            .where(GenerationRow.external_ref == external_ref)
            .order_by(GenerationRow.id)
        )
        return [_to_record(row) for row in await self._read("get_by_external_ref", statement)]

    async def get_by_job_code(self, job_code: str) -> list[GenerationRecord]:
        statement = select(GenerationRow).where(GenerationRow.job_code == job_code).order_by(GenerationRow.id)
        return [_to_record(row) for row in await self._read("get_by_job_code", statement)]

    async def get_between(self, start_ms: int, end_ms: int) -> list[GenerationRecord]:
        statement = (
            select(GenerationRow)
            .where(GenerationRow.timestamp >= start_ms, GenerationRow.timestamp <= end_ms)
            .order_by(GenerationRow.timestamp, GenerationRow.id)
        )
        return [_to_record(row) for row in await self._read("get_between", statement)]

    async def count(self) -> int:
        rows = await self._read("count", select(func.count()).select_from(GenerationRow))
        return int(rows[0]) if rows else 0
