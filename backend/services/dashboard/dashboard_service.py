from collections import Counter
from typing import Dict

from services.workspace.workspace_service import WorkspaceRegistry


def build_summary(registry: WorkspaceRegistry) -> Dict:
    """Live counts over every workspace for the dashboard."""
    priorities: Counter = Counter()
    types: Counter = Counter()
    tags: Counter = Counter()
    scenario_count = 0
    test_case_count = 0
    generating = 0
    analyzed = 0

    for workspace in registry.all():
        if workspace.analysis is not None:
            analyzed += 1
        for scenario in workspace.scenarios.list():
            scenario_count += 1
            priorities[scenario.priority.value] += 1
            types[scenario.requirementType.value] += 1
            if scenario.areTestsGenerating:
                generating += 1
            for test_case in scenario.testCases:
                test_case_count += 1
                for tag in test_case.complianceTags:
                    tags[tag] += 1

    return {
        "workspaces": len(registry.all()),
        "analyzed_workspaces": analyzed,
        "scenarios": scenario_count,
        "test_cases": test_case_count,
        "scenarios_generating": generating,
        "scenarios_by_priority": dict(priorities),
        "scenarios_by_type": dict(types),
        "test_cases_by_compliance_tag": dict(tags),
    }
