"""Revision ledger actions addressed by log entry."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import REVERT_ROLES, require_roles
from app.db.session import get_db
from app.models.user import User
from app.schemas.job_order import JobOrderRead
from app.schemas.job_order_log import RevertRequest, RevertResponse
from app.services.revert_service import RevertError, revert_to

router: APIRouter = APIRouter()

REVERT_ERROR_STATUS: dict[str, int] = {
    RevertError.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RevertError.NO_SNAPSHOT: status.HTTP_409_CONFLICT,
    RevertError.WRITE_FAILED: status.HTTP_400_BAD_REQUEST,
}


@router.post("/{log_entry_id}/revert", response_model=RevertResponse)
def revert(
    log_entry_id: int,
    payload: RevertRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(REVERT_ROLES)),
) -> RevertResponse:
    """Restore the job order to this entry's snapshot after explicit confirmation."""
    if not payload.confirm:
        raise HTTPException(status_code=400, detail="Revert must be confirmed.")
    try:
        result = revert_to(db, log_entry_id, actor_id=current_user.id)
    except RevertError as exc:
        raise HTTPException(status_code=REVERT_ERROR_STATUS[exc.reason], detail=str(exc)) from exc

    outcome = result.outcome
    if outcome.error is not None:
        message = "Job order restored, but the change could not be recorded in its history."
    elif outcome.suppressed:
        message = "Nothing changed; the job order already matches this version."
    else:
        message = "Job order restored and recorded in its history."
    return RevertResponse(
        job_order=JobOrderRead.model_validate(result.job_order),
        reverted_to_entry_id=log_entry_id,
        log_entry_id=outcome.entry.id if outcome.entry is not None else None,
        changed=not outcome.suppressed,
        history_recorded=outcome.error is None,
        message=message,
    )
