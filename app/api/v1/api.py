"""API v1 router composition."""

from fastapi import APIRouter

from app.api.v1.endpoints import admins, agents, audit_logs, auth, stats, transitions, users

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(stats.router, prefix="/admin/stats", tags=["admin"])
api_router.include_router(agents.router, prefix="/admin/agents", tags=["agents"])
api_router.include_router(users.router, prefix="/admin/users", tags=["users"])
api_router.include_router(transitions.router, prefix="/admin/transitions", tags=["transitions"])
api_router.include_router(audit_logs.router, prefix="/admin/audit-logs", tags=["audit"])
api_router.include_router(admins.router, prefix="/admin/admins", tags=["admin"])
