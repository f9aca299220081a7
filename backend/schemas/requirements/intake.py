from typing import List, Optional

from pydantic import BaseModel

from schemas.generator.flow_schemas import (
    ComplianceCheckOutput,
    ProjectDetails,
    ValidateRequirementsOutput,
)


class RequirementsAnalysis(BaseModel):
    """Validation and compliance results for one requirements document."""

    validation: ValidateRequirementsOutput
    compliance: ComplianceCheckOutput
    requirements: str
    projectDetails: Optional[ProjectDetails] = None


class UploadedFileSchema(BaseModel):
    id: str
    name: str
    size: int
    status: str
    error: Optional[str] = None


class DictationSchema(BaseModel):
    status: str
    transcript: str


class IntakeStateSchema(BaseModel):
    status: str
    files: List[UploadedFileSchema]
    manualText: str
    dictation: DictationSchema
    combinedText: str
    canAnalyze: bool
    projectDetails: Optional[ProjectDetails] = None


class ManualTextRequest(BaseModel):
    text: str = ""


class TranscriptRequest(BaseModel):
    transcript: str = ""


class ConfirmAnalysisRequest(BaseModel):
    # Edited details from the confirmation dialog; omitted when parsing failed
    projectDetails: Optional[ProjectDetails] = None


class AnalyzeResponse(BaseModel):
    # Details to confirm, when parsing them succeeded
    projectDetails: Optional[ProjectDetails] = None
    # Set when parsing failed and the analysis ran straight away
    analysis: Optional[RequirementsAnalysis] = None
    detailsError: Optional[str] = None
