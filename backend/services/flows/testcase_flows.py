"""Test case generation flow."""

from typing import List, Optional

from schemas.generator.flow_schemas import GenerateTestCasesInput, GenerateTestCasesOutput
from services.flows.prompt_flow import PromptFlow


generate_test_cases_flow = PromptFlow(
    name="generateTestCases",
    env_prefix="TESTCASE_GENERATOR",
    prompt_module="services.llm.prompts.testcase_generator_prompt",
    input_model=GenerateTestCasesInput,
    output_model=GenerateTestCasesOutput,
    description="Generates compliance-tagged test cases for one scenario.",
)


async def generate_test_cases(
    scenario: str,
    compliance_standards: List[str],
    priority: str,
    model_name: Optional[str] = None,
) -> GenerateTestCasesOutput:
    return await generate_test_cases_flow.run(
        {"scenario": scenario, "complianceStandards": compliance_standards, "priority": priority},
        model_name=model_name,
    )
