# repository.py
from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from sqlalchemy.pool import NullPool
from sqlalchemy import text
from sqlmodel import SQLModel, Field, Session, create_engine, select

from domain import WorkDayEntry

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class RecordParseError(ValueError):
    """Stored month record could not be decoded."""


def dump_month_record(entries: List[WorkDayEntry]) -> str:
    return json.dumps(
        {"version": SCHEMA_VERSION, "entries": [e.to_dict() for e in entries]},
        ensure_ascii=False,
    )


def _parse_entry(item, pos: int) -> WorkDayEntry:
    if not isinstance(item, dict):
        raise RecordParseError(f"entry {pos} is not an object")
    hours = item.get("hours", 0)
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        raise RecordParseError(f"entry {pos}: hours must be a number")
    if not math.isfinite(hours) or hours < 0:
        raise RecordParseError(f"entry {pos}: hours must be finite and non-negative")
    values = {}
    for name in ("date", "start", "end"):
        value = item.get(name) or ""
        if not isinstance(value, str):
            raise RecordParseError(f"entry {pos}: {name} must be a string")
        values[name] = value
    return WorkDayEntry(hours=float(hours), **values)


def parse_month_record(raw: str) -> List[WorkDayEntry]:
    """
    Decodes a stored month record.
    Accepts the versioned object form and the legacy bare list of entries.
    Raises RecordParseError on anything else.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise RecordParseError(f"invalid JSON: {e}") from e

    if isinstance(data, dict):
        version = data.get("version")
        if version != SCHEMA_VERSION:
            raise RecordParseError(f"unsupported schema version: {version!r}")
        items = data.get("entries")
    else:
        items = data
    if not isinstance(items, list):
        raise RecordParseError("entries must be a list")
    return [_parse_entry(item, i) for i, item in enumerate(items)]


class RecordStore(Protocol):
    """Key-value store of serialized month records."""

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, payload: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


class InMemoryRecordStore:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, payload: str) -> None:
        self._data[key] = payload

    def keys(self) -> List[str]:
        return sorted(self._data)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MonthRecordDB(SQLModel, table=True):
    __tablename__ = "month_records"

    key: str = Field(primary_key=True)
    payload: str
    updated_at: datetime = Field(default_factory=_utcnow)


def build_engine(db_url: str, echo: bool = False):
    is_sqlite = db_url.startswith("sqlite")
    kwargs = {
        "echo": echo,
        "pool_pre_ping": True,
        "connect_args": {},
    }
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        # Serverless PG (Neon/Supabase): no local pool, bounded connect time
        kwargs["poolclass"] = NullPool
        kwargs["connect_args"] = {"connect_timeout": 10}
        if "sslmode=" not in db_url:
            db_url += ("&" if "?" in db_url else "?") + "sslmode=require"
    return create_engine(db_url, **kwargs)


class MonthRecordRepository:
    """Month records in a SQL table. Never falls back to SQLite when given Postgres."""
    def __init__(self, url: str = "sqlite:///shiftmate.db", echo: bool = False):
        self.primary_url = url
        self.engine = build_engine(url, echo=echo)

        if not url.startswith("sqlite"):
            try:
                with self.engine.connect() as conn:
                    conn.execute(text("select 1"))
            except Exception as e:
                raise RuntimeError(f"Could not connect to Postgres: {e}") from e

        SQLModel.metadata.create_all(self.engine)

    def get(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            row = session.get(MonthRecordDB, key)
            return row.payload if row else None

    def put(self, key: str, payload: str) -> None:
        with Session(self.engine) as session:
            row = session.get(MonthRecordDB, key)
            if row is None:
                row = MonthRecordDB(key=key, payload=payload)
            else:
                row.payload = payload
                row.updated_at = _utcnow()
            session.add(row)
            session.commit()
        logger.debug("Saved month record %s", key)

    def keys(self) -> List[str]:
        with Session(self.engine) as session:
            return list(session.exec(select(MonthRecordDB.key).order_by(MonthRecordDB.key)).all())


__all__ = [
    "InMemoryRecordStore",
    "MonthRecordDB",
    "MonthRecordRepository",
    "RecordParseError",
    "RecordStore",
    "build_engine",
    "dump_month_record",
    "parse_month_record",
]
