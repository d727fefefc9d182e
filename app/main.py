"""FastAPI entrypoint for the job order revision ledger."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.api import api_router
from app.core.config import settings
from app.db.base import Base
from app.db.seed import ensure_default_admin
from app.db.session import SessionLocal, engine
from app.models.job_order_log import LedgerEntryImmutable

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        try:
            admin_present = ensure_default_admin(session)
            logger.info("[BOOTSTRAP] default admin present: %s", "yes" if admin_present else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Admin bootstrap failed; continuing startup.")


@app.exception_handler(LedgerEntryImmutable)
def ledger_entry_immutable_handler(request: Request, exc: LedgerEntryImmutable) -> JSONResponse:
    logger.error("[LEDGER] Refused mutation of history on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "History entries cannot be modified."})


@app.get("/")
def root() -> dict[str, str]:
    return {"name": settings.app_name, "status": "ok"}
