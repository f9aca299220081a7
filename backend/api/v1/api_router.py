from fastapi import APIRouter
from .endpoints.workspaces import router as workspaces_router
from .endpoints.requirements_intake import router as intake_router
from .endpoints.scenarios_management import router as scenarios_router
from .endpoints.flows import router as flows_router
from .endpoints.model_management import router as model_router
from .endpoints.dashboard import router as dashboard_router


api_router = APIRouter(prefix="/api/v1")

api_router.include_router(workspaces_router, prefix="/workspaces", tags=["workspaces"])
api_router.include_router(intake_router, prefix="/workspaces", tags=["requirements-intake"])
api_router.include_router(scenarios_router, prefix="/workspaces", tags=["scenarios"])
api_router.include_router(flows_router, prefix="/flows", tags=["flows"])
api_router.include_router(model_router, tags=["models"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
