"""
Backend — Milestone Ledger Store
==================================

SQLAlchemy persistence for global XP state and the clout milestone
ledger.

The ledger is insert-only and unique on (creator_id, milestone_level).
Each award is written in its own savepoint, so a milestone credited
by a concurrent recalculation surfaces as an IntegrityError and is
skipped instead of being paid twice.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, create_engine, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from xp_engine.models import GlobalXPState
from xp_engine.rules import CLOUT_SOURCE, clout_bonus_for_level

logger = logging.getLogger("backend.database")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Tables
# ─────────────────────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    pass


class GlobalXPRecord(Base):
    __tablename__ = "global_community_xp"

    creator_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    total_global_xp: Mapped[int] = mapped_column(Integer, default=0)
    global_level: Mapped[int] = mapped_column(Integer, default=1)
    tap_multiplier_bonus: Mapped[int] = mapped_column(Integer, default=0)
    permanent_clout_bonus: Mapped[int] = mapped_column(Integer, default=0)
    communities_active: Mapped[int] = mapped_column(Integer, default=0)
    last_calculated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class CloutBonusLog(Base):
    __tablename__ = "clout_bonus_log"
    __table_args__ = (
        UniqueConstraint("creator_id", "milestone_level", name="uq_clout_bonus_creator_milestone"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    creator_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    milestone_level: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    global_level: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(64), default=CLOUT_SOURCE)
    awarded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


# ─────────────────────────────────────────────────────────────────────────────
# Ledger
# ─────────────────────────────────────────────────────────────────────────────
class MilestoneLedger:
    """Reads and extends the per-creator milestone ledger."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session = sessionmaker(bind=engine, expire_on_commit=False)

    def awarded_milestones(self, creator_id: str) -> set[int]:
        with self._session() as session:
            rows = session.scalars(
                select(CloutBonusLog.milestone_level).where(CloutBonusLog.creator_id == creator_id)
            )
            return set(rows)

    def record_awards(
        self,
        creator_id: str,
        milestone_levels: Iterable[int],
        global_level: int,
    ) -> list[int]:
        """Credit milestones; return only the levels this call inserted."""
        inserted: list[int] = []
        with self._session() as session:
            for level in sorted(set(milestone_levels)):
                try:
                    with session.begin_nested():
                        session.add(CloutBonusLog(
                            creator_id=creator_id,
                            milestone_level=level,
                            amount=clout_bonus_for_level(level),
                            global_level=global_level,
                            source=CLOUT_SOURCE,
                        ))
                except IntegrityError:
                    logger.info("Milestone %d already credited to %s — skipping", level, creator_id)
                    continue
                inserted.append(level)
                logger.info(
                    "Credited milestone Lv %d (+%d clout) to %s",
                    level, clout_bonus_for_level(level), creator_id,
                )
            session.commit()
        return inserted

    def load_state(self, creator_id: str) -> Optional[GlobalXPState]:
        with self._session() as session:
            record = session.get(GlobalXPRecord, creator_id)
            return _to_state(record) if record is not None else None

    def save_state(self, state: GlobalXPState) -> GlobalXPState:
        """Upsert the creator's state and return what was stored.

        The row is read and written in one locked transaction, and the
        stored ``permanent_clout_bonus`` only ever grows: a stale
        recalculation that saves last cannot lower it.
        """
        try:
            return self._upsert_state(state)
        except IntegrityError:
            # a concurrent first save created the row; fold into it
            logger.info("State row for %s created concurrently — retrying as update", state.creator_id)
            return self._upsert_state(state)

    def _upsert_state(self, state: GlobalXPState) -> GlobalXPState:
        with self._session() as session:
            record = session.get(GlobalXPRecord, state.creator_id, with_for_update=True)
            if record is None:
                record = GlobalXPRecord(creator_id=state.creator_id, permanent_clout_bonus=0)
                session.add(record)

            if state.permanent_clout_bonus < record.permanent_clout_bonus:
                logger.warning(
                    "Ignoring lower clout bonus for %s (%d < stored %d)",
                    state.creator_id, state.permanent_clout_bonus, record.permanent_clout_bonus,
                )

            record.total_global_xp = state.total_global_xp
            record.global_level = state.global_level
            record.tap_multiplier_bonus = state.tap_multiplier_bonus
            record.permanent_clout_bonus = max(record.permanent_clout_bonus, state.permanent_clout_bonus)
            record.communities_active = state.communities_active
            record.last_calculated_at = state.last_calculated_at or _utcnow()
            session.commit()
            return _to_state(record)


def _to_state(record: GlobalXPRecord) -> GlobalXPState:
    return GlobalXPState(
        creator_id=record.creator_id,
        total_global_xp=record.total_global_xp,
        global_level=record.global_level,
        tap_multiplier_bonus=record.tap_multiplier_bonus,
        permanent_clout_bonus=record.permanent_clout_bonus,
        communities_active=record.communities_active,
        last_calculated_at=record.last_calculated_at,
    )


def _enable_sqlite_savepoints(engine: Engine) -> None:
    # pysqlite defers BEGIN on its own; emit it explicitly so SAVEPOINT nests
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_ledger(database_url: str) -> MilestoneLedger:
    """Build a ledger for ``database_url`` and create its tables."""
    kwargs: dict = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees a fresh empty db
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    if is_sqlite:
        _enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    logger.info("Milestone ledger ready — %s", engine.url.render_as_string(hide_password=True))
    return MilestoneLedger(engine)
