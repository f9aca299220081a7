"""
Action layer between the workflows and the prompt flows.

Each action invokes exactly one flow and reshapes its input or output for the
caller. Flow errors propagate unchanged.
"""

import logging
from typing import List, Sequence

from schemas.generator.flow_schemas import (
    ComplianceCheckOutput,
    ProjectDetails,
    TestCase,
    ValidateRequirementsOutput,
)
from schemas.generator.scenario import Scenario
from services.flows import requirements_flows, scenario_flows, testcase_flows

logger = logging.getLogger(__name__)


async def run_validation(requirements: str) -> ValidateRequirementsOutput:
    return await requirements_flows.validate_requirements(requirements)


async def run_compliance_check(requirements: str, compliance_standards: str) -> ComplianceCheckOutput:
    return await requirements_flows.compliance_check(requirements, compliance_standards)


async def run_parse_project_details(requirements: str) -> ProjectDetails:
    return await requirements_flows.parse_project_details(requirements)


async def run_test_case_generation(
    scenario_description: str,
    compliance_standards: Sequence[str],
    priority: str,
) -> List[TestCase]:
    """
    Generate test cases for one scenario.

    Args:
        scenario_description: Scenario description sent as the flow's `scenario`
        compliance_standards: Standards the cases should be tagged against
        priority: Scenario priority (High/Medium/Low)

    Returns:
        The generated test cases in model order
    """
    result = await testcase_flows.generate_test_cases(
        scenario_description, list(compliance_standards), priority
    )
    logger.info("actions_service: generated %d test cases", len(result.testCases))
    return list(result.testCases)


def flatten_test_cases(test_cases: Sequence[TestCase]) -> str:
    """Render test cases as `ID: <testCaseId>, Title: <title>` lines."""
    return "\n".join(f"ID: {tc.testCaseId}, Title: {tc.title}" for tc in test_cases)


async def run_impact_analysis(change_description: str, test_cases: Sequence[TestCase]) -> str:
    """
    Describe how a requirement change affects existing test cases.

    Returns:
        The impact analysis narrative
    """
    result = await scenario_flows.analyze_impact_on_change(
        change_description, flatten_test_cases(test_cases)
    )
    return result.impactAnalysis


async def run_parse_scenarios(requirements: str) -> List[Scenario]:
    """
    Split a requirements document into Scenario records.

    Each parsed scenario becomes a Scenario with id = reqId, no test cases and
    no generation running.
    """
    result = await scenario_flows.parse_scenarios(requirements)
    scenarios = [Scenario.from_parsed(parsed) for parsed in result.scenarios]
    logger.info("actions_service: parsed %d scenarios", len(scenarios))
    return scenarios
