"""Job order endpoints and their revision history."""

from datetime import date

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.job_order import JobOrder
from app.models.user import User
from app.schemas.job_order import JobOrderCreate, JobOrderRead, JobOrderWriteResponse
from app.schemas.job_order_log import ActorRead, HistoryFilters, JobOrderLogRead
from app.services.history_export import export_filename, export_history_csv
from app.services.history_query import distinct_actors, query_history
from app.services.job_order_service import (
    EntityWriteFailed,
    EntityWriteResult,
    JobOrderNotFound,
    create_job_order,
    get_job_order,
    update_job_order,
)

router: APIRouter = APIRouter()


def _load_job_order(db: Session, job_order_id: int) -> JobOrder:
    try:
        return get_job_order(db, job_order_id)
    except JobOrderNotFound as exc:
        raise HTTPException(status_code=404, detail="Job order not found") from exc


def _write_error(exc: EntityWriteFailed) -> HTTPException:
    code = status.HTTP_409_CONFLICT if exc.conflict else status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


def _write_response(result: EntityWriteResult, saved_message: str) -> JobOrderWriteResponse:
    outcome = result.outcome
    if outcome.error is not None:
        message = "Job order saved, but the change could not be recorded in its history."
    elif outcome.suppressed:
        message = "No tracked fields changed; nothing was recorded."
    else:
        message = saved_message
    return JobOrderWriteResponse(
        job_order=JobOrderRead.model_validate(result.job_order),
        log_entry_id=outcome.entry.id if outcome.entry is not None else None,
        history_recorded=outcome.error is None,
        message=message,
    )


def _history_filters(
    actor_id: int | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
) -> HistoryFilters:
    return HistoryFilters(actor_id=actor_id, date_from=date_from, date_to=date_to)


@router.post("", response_model=JobOrderWriteResponse, status_code=status.HTTP_201_CREATED)
def create(
    payload: JobOrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobOrderWriteResponse:
    try:
        result = create_job_order(db, payload, actor_id=current_user.id)
    except EntityWriteFailed as exc:
        raise _write_error(exc) from exc
    return _write_response(result, "Job order created.")


@router.get("/{job_order_id}", response_model=JobOrderRead)
def read(
    job_order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobOrder:
    return _load_job_order(db, job_order_id)


@router.patch("/{job_order_id}", response_model=JobOrderWriteResponse)
def update(
    job_order_id: int,
    changes: dict = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobOrderWriteResponse:
    """Apply a partial update; the body is validated by the job order store."""
    try:
        result = update_job_order(db, job_order_id, changes, actor_id=current_user.id)
    except JobOrderNotFound as exc:
        raise HTTPException(status_code=404, detail="Job order not found") from exc
    except EntityWriteFailed as exc:
        raise _write_error(exc) from exc
    return _write_response(result, "Job order updated.")


@router.get("/{job_order_id}/history", response_model=list[JobOrderLogRead])
def get_history(
    job_order_id: int,
    filters: HistoryFilters = Depends(_history_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[JobOrderLogRead]:
    _load_job_order(db, job_order_id)
    return query_history(db, job_order_id, filters)


@router.get("/{job_order_id}/history/actors", response_model=list[ActorRead])
def get_actors(
    job_order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ActorRead]:
    _load_job_order(db, job_order_id)
    return distinct_actors(db, job_order_id)


@router.get("/{job_order_id}/history/export")
def export_history(
    job_order_id: int,
    filters: HistoryFilters = Depends(_history_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    job_order = _load_job_order(db, job_order_id)
    content = export_history_csv(query_history(db, job_order_id, filters))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(job_order.job_order_number)}"'},
    )
