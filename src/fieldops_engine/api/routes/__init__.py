"""API routes."""

from fieldops_engine.api.routes.health import router as health_router
from fieldops_engine.api.routes.payroll import router as payroll_router
from fieldops_engine.api.routes.scheduling import router as scheduling_router
from fieldops_engine.api.routes.timeline import router as timeline_router

__all__ = ["health_router", "payroll_router", "scheduling_router", "timeline_router"]
