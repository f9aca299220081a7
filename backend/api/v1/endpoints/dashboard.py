from fastapi import APIRouter, Depends

from services.dashboard.dashboard_service import build_summary
from services.workspace.workspace_service import WorkspaceRegistry, get_workspace_registry

router = APIRouter()


@router.get("/summary")
def dashboard_summary(registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    return build_summary(registry)
