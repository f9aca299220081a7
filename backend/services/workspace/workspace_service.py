"""
In-memory workspaces.

A workspace is everything one browser session works on: the intake session,
the scenario collection, the last completed analysis and the queue of
notifications waiting to be shown.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from schemas.requirements.intake import RequirementsAnalysis
from services.requirements.intake_service import IntakeSession
from services.scenarios.scenario_manager import ScenarioManager
from services.workspace.notifications import NotificationQueue

logger = logging.getLogger(__name__)


class WorkspaceNotFoundError(Exception):
    pass


@dataclass
class Workspace:
    id: str
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    notifications: NotificationQueue = field(default_factory=NotificationQueue)
    intake: Optional[IntakeSession] = None
    scenarios: Optional[ScenarioManager] = None
    analysis: Optional[RequirementsAnalysis] = None

    def __post_init__(self) -> None:
        if self.intake is None:
            self.intake = IntakeSession(notifier=self.notifications.push)
        if self.scenarios is None:
            self.scenarios = ScenarioManager(notifier=self.notifications.push)

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "created_at": self.created_at,
            "intake_status": self.intake.status.value,
            "has_analysis": self.analysis is not None,
            "scenario_count": len(self.scenarios.list()),
            "pending_notifications": len(self.notifications),
        }


class WorkspaceRegistry:
    def __init__(self) -> None:
        self._workspaces: Dict[str, Workspace] = {}

    def create(self) -> Workspace:
        workspace = Workspace(id=uuid.uuid4().hex)
        self._workspaces[workspace.id] = workspace
        logger.info("workspace_service: created workspace %s", workspace.id)
        return workspace

    def get(self, workspace_id: str) -> Workspace:
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(f"workspace '{workspace_id}' not found")
        return workspace

    def delete(self, workspace_id: str) -> None:
        workspace = self.get(workspace_id)
        workspace.scenarios.replace_all([])
        del self._workspaces[workspace_id]
        logger.info("workspace_service: deleted workspace %s", workspace_id)

    def all(self) -> List[Workspace]:
        return list(self._workspaces.values())

    def clear(self) -> None:
        self._workspaces.clear()


workspace_registry = WorkspaceRegistry()


def get_workspace_registry() -> WorkspaceRegistry:
    return workspace_registry
