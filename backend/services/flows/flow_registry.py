"""Lookup table of every prompt flow, used by the developer flow endpoints."""

from typing import Dict, List, Optional

from services.flows.prompt_flow import PromptFlow
from services.flows.requirements_flows import (
    compliance_check_flow,
    parse_project_details_flow,
    validate_requirements_flow,
)
from services.flows.scenario_flows import impact_analysis_flow, parse_scenarios_flow
from services.flows.testcase_flows import generate_test_cases_flow


FLOW_REGISTRY: Dict[str, PromptFlow] = {
    flow.name: flow
    for flow in (
        validate_requirements_flow,
        compliance_check_flow,
        parse_project_details_flow,
        parse_scenarios_flow,
        generate_test_cases_flow,
        impact_analysis_flow,
    )
}


def get_flow(name: str) -> Optional[PromptFlow]:
    return FLOW_REGISTRY.get(name)


def list_flows() -> List[dict]:
    return [flow.describe() for flow in FLOW_REGISTRY.values()]
