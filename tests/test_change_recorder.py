"""Ledger write path tests."""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.db.base import Base
from app.models import JobOrder, JobOrderLog, LedgerEntryImmutable, User
from app.schemas.job_order import JobOrderCreate
from app.services import change_recorder, job_order_service
from app.services.change_recorder import record_change
from app.services.job_order_service import EntityWriteFailed, create_job_order, update_job_order
from app.utils.time import as_utc


def _session_factory(tmp_path: Path, name: str) -> sessionmaker:
    engine = create_engine(f"sqlite:///{tmp_path / name}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _add_user(db: Session, username: str) -> int:
    user = User(username=username, full_name=username.title(), password_hash="x", role="EMPLOYEE", is_active=True)
    db.add(user)
    db.commit()
    return user.id


def _entries(db: Session, job_order_id: int) -> list[JobOrderLog]:
    return db.scalars(
        select(JobOrderLog).where(JobOrderLog.job_order_id == job_order_id).order_by(JobOrderLog.seq)
    ).all()


def test_create_records_created_entry_with_snapshot(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_create.db")
    with session_local() as db:
        actor_id = _add_user(db, "alice")
        result = create_job_order(db, JobOrderCreate(status="pending", estimated_hours=Decimal("8")), actor_id)

        entries = _entries(db, result.job_order.id)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.action == "created"
        assert entry.changed_fields is None
        assert entry.changed_by == actor_id
        assert entry.seq == 1
        assert entry.snapshot["status"] == "pending"
        assert entry.snapshot["estimated_hours"] == 8
        assert entry.snapshot["job_order_number"] == "JO-00001"
        assert result.outcome.entry.id == entry.id


def test_noop_update_is_suppressed(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_noop.db")
    with session_local() as db:
        actor_id = _add_user(db, "alice")
        job_order_id = create_job_order(db, JobOrderCreate(status="pending"), actor_id).job_order.id

        result = update_job_order(db, job_order_id, {"status": "pending", "estimated_hours": None}, actor_id)

        assert result.outcome.suppressed
        assert len(_entries(db, job_order_id)) == 1


def test_update_records_only_changed_tracked_fields(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_update.db")
    with session_local() as db:
        actor_id = _add_user(db, "alice")
        job_order_id = create_job_order(
            db, JobOrderCreate(status="pending", priority="low", estimated_hours=Decimal("8")), actor_id
        ).job_order.id

        result = update_job_order(
            db, job_order_id, {"priority": "urgent", "status": "designing", "estimated_hours": "8"}, actor_id
        )

        entry = result.outcome.entry
        assert entry.action == "updated"
        assert list(entry.changed_fields) == ["status", "priority"]
        assert entry.changed_fields["priority"] == {"old": "low", "new": "urgent"}
        assert entry.snapshot["status"] == "designing"
        assert entry.seq == 2


def test_entries_are_sequenced_and_never_go_back_in_time(tmp_path: Path, monkeypatch) -> None:
    session_local = _session_factory(tmp_path, "recorder_clock.db")
    base = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
    ticks = iter([base, base - timedelta(hours=1), base + timedelta(minutes=5)])
    monkeypatch.setattr(change_recorder, "utc_now", lambda: next(ticks))

    with session_local() as db:
        actor_id = _add_user(db, "alice")
        job_order_id = create_job_order(db, JobOrderCreate(), actor_id).job_order.id
        update_job_order(db, job_order_id, {"status": "in-progress"}, actor_id)
        update_job_order(db, job_order_id, {"status": "completed"}, actor_id)

        entries = _entries(db, job_order_id)
        assert [entry.seq for entry in entries] == [1, 2, 3]
        stamps = [as_utc(entry.changed_at) for entry in entries]
        assert stamps == sorted(stamps)
        assert stamps[1] == base


def test_rejected_write_leaves_no_history(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_rejected.db")
    with session_local() as db:
        actor_id = _add_user(db, "alice")
        job_order_id = create_job_order(db, JobOrderCreate(), actor_id).job_order.id

        with pytest.raises(EntityWriteFailed):
            update_job_order(db, job_order_id, {"status": "archived"}, actor_id)
        with pytest.raises(EntityWriteFailed):
            update_job_order(db, job_order_id, {"id": 99, "status": "completed"}, actor_id)

        assert len(_entries(db, job_order_id)) == 1
        assert db.get(JobOrder, job_order_id).status == "pending"


def test_duplicate_job_order_number_is_a_conflict(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_conflict.db")
    with session_local() as db:
        actor_id = _add_user(db, "alice")
        create_job_order(db, JobOrderCreate(job_order_number="JO-7"), actor_id)

        with pytest.raises(EntityWriteFailed) as exc_info:
            create_job_order(db, JobOrderCreate(job_order_number="JO-7"), actor_id)

        assert exc_info.value.conflict is True
        assert len(db.scalars(select(JobOrderLog)).all()) == 1


def test_failed_append_keeps_entity_write_and_logs_divergence(tmp_path: Path, monkeypatch, caplog) -> None:
    session_local = _session_factory(tmp_path, "recorder_divergence.db")
    with session_local() as db:
        actor_id = _add_user(db, "alice")
        job_order_id = create_job_order(db, JobOrderCreate(), actor_id).job_order.id

        def _broken_last_entry(_db, _job_order_id):
            raise SQLAlchemyError("ledger unavailable")

        monkeypatch.setattr(change_recorder, "_last_entry", _broken_last_entry)
        with caplog.at_level(logging.ERROR, logger="app.services.change_recorder"):
            result = update_job_order(db, job_order_id, {"status": "completed"}, actor_id)

        assert result.outcome.error is not None
        assert result.outcome.entry is None
        assert not result.outcome.suppressed
        assert "[LEDGER]" in caplog.text

    with session_local() as db:
        assert db.get(JobOrder, job_order_id).status == "completed"
        assert len(_entries(db, job_order_id)) == 1


def test_record_change_direct_call_records_update(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_direct.db")
    with session_local() as db:
        job_order_id = create_job_order(db, JobOrderCreate(), None).job_order.id

        entry = record_change(
            db,
            job_order_id=job_order_id,
            actor_id=None,
            previous={"status": "pending"},
            current={"status": "finished"},
        )

        assert entry.action == "updated"
        assert entry.changed_by is None
        assert entry.changed_fields == {"status": {"old": "pending", "new": "finished"}}
        assert entry.seq == 2


def test_record_change_without_previous_state_is_created(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_direct_created.db")
    with session_local() as db:
        job_order = JobOrder(job_order_number="JO-LEGACY", status="pending", priority="medium", approval_status="pending")
        db.add(job_order)
        db.flush()

        entry = record_change(
            db,
            job_order_id=job_order.id,
            actor_id=None,
            previous=None,
            current={"status": "pending"},
        )
        db.commit()

        assert entry.action == "created"
        assert entry.changed_fields is None
        assert entry.seq == 1
        assert entry.snapshot == {"status": "pending"}


def test_log_entries_cannot_be_modified_or_deleted(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "recorder_immutable.db")
    with session_local() as db:
        job_order_id = create_job_order(db, JobOrderCreate(), None).job_order.id
        entry = _entries(db, job_order_id)[0]

        entry.action = "updated"
        with pytest.raises(LedgerEntryImmutable):
            db.commit()
        db.rollback()

        db.delete(_entries(db, job_order_id)[0])
        with pytest.raises(LedgerEntryImmutable):
            db.commit()
        db.rollback()

        assert _entries(db, job_order_id)[0].action == "created"


def test_competing_writer_cannot_commit_before_first_write_is_recorded(tmp_path: Path, monkeypatch) -> None:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'recorder_interleave.db'}",
        connect_args={"check_same_thread": False, "timeout": 0.1},
    )
    Base.metadata.create_all(bind=engine)
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with session_local() as db:
        actor_id = _add_user(db, "alice")
        job_order_id = create_job_order(db, JobOrderCreate(status="pending"), actor_id).job_order.id

    real_on_entity_write = job_order_service.on_entity_write
    competing_attempts: list[int] = []

    def _on_entity_write_with_competing_writer(*args, **kwargs):
        # Runs between the first writer's entity write and its log append.
        if not competing_attempts:
            competing_attempts.append(job_order_id)
            with session_local() as other:
                with pytest.raises(EntityWriteFailed):
                    update_job_order(other, job_order_id, {"status": "completed"}, actor_id)
        return real_on_entity_write(*args, **kwargs)

    monkeypatch.setattr(job_order_service, "on_entity_write", _on_entity_write_with_competing_writer)

    with session_local() as db:
        first = update_job_order(db, job_order_id, {"status": "in-progress"}, actor_id)
        assert first.outcome.recorded

    with session_local() as db:
        update_job_order(db, job_order_id, {"status": "completed"}, actor_id)

    with session_local() as db:
        final = db.get(JobOrder, job_order_id)
        entries = _entries(db, job_order_id)

        assert competing_attempts == [job_order_id]
        assert [entry.seq for entry in entries] == [1, 2, 3]
        assert entries[1].changed_fields == {"status": {"old": "pending", "new": "in-progress"}}
        assert entries[2].changed_fields == {"status": {"old": "in-progress", "new": "completed"}}
        assert entries[-1].snapshot["status"] == final.status == "completed"
