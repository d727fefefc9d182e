"""API v1 router composition."""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, job_order_logs, job_orders

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(job_orders.router, prefix="/job-orders", tags=["job-orders"])
api_router.include_router(job_order_logs.router, prefix="/job-order-logs", tags=["history"])
