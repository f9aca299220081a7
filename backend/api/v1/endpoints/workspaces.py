import logging

from fastapi import APIRouter, Depends, HTTPException

from api.v1.errors import to_http_exception
from deps import get_workspace
from services.requirements.requirements_service import get_analysis
from services.workspace.workspace_service import (
    Workspace,
    WorkspaceRegistry,
    get_workspace_registry,
)


router = APIRouter()

logger = logging.getLogger(__name__)


@router.post("", status_code=201)
def create_workspace(registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    workspace = registry.create()
    return workspace.snapshot()


@router.get("/{workspace_id}")
def read_workspace(workspace: Workspace = Depends(get_workspace)):
    return workspace.snapshot()


@router.delete("/{workspace_id}")
def delete_workspace(
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    registry.delete(workspace.id)
    return {"deleted": True, "id": workspace.id}


@router.get("/{workspace_id}/notifications")
def drain_notifications(workspace: Workspace = Depends(get_workspace)):
    """Return and clear the notifications queued for the workspace."""
    return {"notifications": [n.to_dict() for n in workspace.notifications.drain()]}


@router.get("/{workspace_id}/analysis")
def read_analysis(workspace: Workspace = Depends(get_workspace)):
    try:
        analysis = get_analysis(workspace)
        if analysis is None:
            raise HTTPException(status_code=404, detail="No analysis stored for this workspace")
        return analysis.model_dump(mode="json")
    except HTTPException:
        raise
    except Exception as e:
        logger.error("workspaces: failed to read analysis for %s: %s", workspace.id, e)
        raise to_http_exception(e)
