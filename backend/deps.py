import logging
from fastapi import Depends, HTTPException
from db.session import get_db
from services.workspace.workspace_service import (
    Workspace,
    WorkspaceNotFoundError,
    WorkspaceRegistry,
    get_workspace_registry,
)

logger = logging.getLogger(__name__)

__all__ = ["get_db", "get_workspace", "get_workspace_registry"]


def get_workspace(
    workspace_id: str,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
) -> Workspace:
    """
    Dependency resolving the workspace named in the route path.
    """
    try:
        return registry.get(workspace_id)
    except WorkspaceNotFoundError:
        logger.info("deps: workspace %s not found", workspace_id)
        raise HTTPException(status_code=404, detail=f"Workspace '{workspace_id}' not found")
