"""
Tests for decoding model replies into flow output models
"""

import json

import pytest
from langchain_core.exceptions import OutputParserException

from schemas.generator.flow_schemas import (
    ComplianceCheckOutput,
    GenerateTestCasesOutput,
    ParseScenariosOutput,
)
from services.llm.errors import ModelOutputError
from services.llm.gemini.json_output_parser import (
    FlowOutputParser,
    StrictJSONOutputParser,
    get_format_instructions,
    parse_flow_output,
)


def test_strict_parser_reads_plain_json():
    assert StrictJSONOutputParser().parse('{"a": 1}') == {"a": 1}


def test_strict_parser_reads_fenced_json():
    text = 'Here you go:\n```json\n{"complianceReport": "ok", "suggestions": "none"}\n```\nThanks'
    assert StrictJSONOutputParser().parse(text)["complianceReport"] == "ok"


def test_strict_parser_reads_json_embedded_in_prose():
    text = 'Sure! {"impactAnalysis": "TC-001 must change"} Let me know.'
    assert StrictJSONOutputParser().parse(text) == {"impactAnalysis": "TC-001 must change"}


def test_strict_parser_rejects_text_without_json():
    with pytest.raises(OutputParserException):
        StrictJSONOutputParser().parse("I could not do that.")


def test_strict_parser_rejects_empty_reply():
    with pytest.raises(OutputParserException):
        StrictJSONOutputParser().parse("   ")


def test_bare_array_is_wrapped_into_single_list_field(testcases_reply):
    parsed = FlowOutputParser(GenerateTestCasesOutput).parse(
        json.dumps(testcases_reply["testCases"])
    )
    assert [tc.testCaseId for tc in parsed.testCases] == ["TC-001", "TC-002"]


def test_enum_casing_is_normalized(scenarios_reply):
    scenarios_reply["scenarios"][0]["priority"] = "high"
    scenarios_reply["scenarios"][0]["requirementType"] = "non-functional"
    parsed = FlowOutputParser(ParseScenariosOutput).parse(json.dumps(scenarios_reply))
    assert parsed.scenarios[0].priority.value == "High"
    assert parsed.scenarios[0].requirementType.value == "Non-Functional"


def test_out_of_enum_value_is_rejected(scenarios_reply):
    scenarios_reply["scenarios"][0]["priority"] = "Urgent"
    with pytest.raises(ModelOutputError) as exc:
        parse_flow_output("parseScenarios", ParseScenariosOutput, json.dumps(scenarios_reply))
    assert exc.value.flow_name == "parseScenarios"


def test_missing_required_field_is_rejected():
    with pytest.raises(ModelOutputError) as exc:
        parse_flow_output("complianceCheck", ComplianceCheckOutput, '{"complianceReport": "only half"}')
    assert "complianceReport" in exc.value.raw_output


def test_format_instructions_mention_output_fields():
    instructions = get_format_instructions(ComplianceCheckOutput)
    assert "complianceReport" in instructions
    assert "suggestions" in instructions
