"""API v1 router aggregation."""

from fastapi import APIRouter

from routers.v1.effort_mappings import router as effort_mappings_router
from routers.v1.employees import router as employees_router
from routers.v1.projects import router as projects_router
from routers.v1.work_items import live_issues_router, tasks_router
from routers.v1.workload import router as workload_router

# Create v1 API router
router = APIRouter(prefix="/v1")

# Include sub-routers
router.include_router(employees_router, prefix="/employees", tags=["Employees"])
router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])
router.include_router(live_issues_router, prefix="/live-issues", tags=["Live Issues"])
router.include_router(effort_mappings_router, prefix="/effort-mappings", tags=["Effort Mappings"])
router.include_router(projects_router, prefix="/projects", tags=["Projects"])
router.include_router(workload_router, prefix="/workload", tags=["Workload"])
