"""
Requirements intake.

Assembles one requirements document from three channels: uploaded files, a
typed text block and voice dictation (transcripts arrive from the client). The
combined text is recomputed from the channels on every read. Analysis runs the
project-details parser first, then completeness validation and the compliance
check concurrently.
"""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from core.config import ComplianceConfigs, IntakeConfigs
from schemas.generator.flow_schemas import ProjectDetails
from schemas.requirements.intake import (
    AnalyzeResponse,
    DictationSchema,
    IntakeStateSchema,
    RequirementsAnalysis,
    UploadedFileSchema,
)
from services.generator import actions_service
from services.llm.errors import FlowError

logger = logging.getLogger(__name__)

Notifier = Callable[..., object]


class IntakeError(Exception):
    """Intake request that cannot be served in the current state."""


class AnalysisInProgressError(IntakeError):
    """An analysis for this document is already running."""


class FileStatus(str, Enum):
    QUEUED = "Queued"
    READING = "Reading"
    READY = "Ready"
    FAILED = "Failed"


class DictationStatus(str, Enum):
    IDLE = "Idle"
    RECORDING = "Recording"
    REVIEWING = "Reviewing"
    ACCEPTED = "Accepted"
    DISCARDED = "Discarded"


class IntakeStatus(str, Enum):
    EMPTY = "Empty"
    ASSEMBLING = "Assembling"
    ANALYSIS_PENDING = "Analysis Pending"
    ANALYSIS_COMPLETE = "Analysis Complete"


@dataclass(frozen=True)
class SourceContent:
    """What a document source can contribute right now."""

    state: str  # ready | pending | failed
    text: str = ""

    @classmethod
    def ready(cls, text: str) -> "SourceContent":
        return cls("ready", text)

    @classmethod
    def pending(cls) -> "SourceContent":
        return cls("pending")

    @classmethod
    def failed(cls) -> "SourceContent":
        return cls("failed")


class DocumentSource(Protocol):
    def content_ready(self) -> SourceContent:
        ...


def combine_requirements(file_contents: Sequence[str], manual_text: str) -> str:
    """
    Build the requirements document.

    Non-empty file contents are joined by a blank line in upload order, then
    the manual text is appended after another blank line. Empty parts never
    contribute separators.
    """
    all_content = "\n\n".join(c for c in file_contents if c)
    return "\n\n".join(part for part in (all_content, manual_text) if part)


def is_accepted_file(name: str) -> bool:
    return os.path.splitext(name or "")[1].lower() in IntakeConfigs.ACCEPTED_EXTENSIONS


class UploadedFile:
    """One file moving through Queued -> Reading -> Ready | Failed."""

    def __init__(self, name: str, size: int = 0):
        self.id = uuid.uuid4().hex
        self.name = name
        self.size = size
        self.status = FileStatus.QUEUED
        self.content = ""
        self.error: Optional[str] = None

    def start_reading(self) -> None:
        if self.status != FileStatus.QUEUED:
            raise IntakeError(f"file '{self.name}' is {self.status.value}, cannot start reading")
        self.status = FileStatus.READING

    def finish_reading(self, data: bytes) -> None:
        if self.status != FileStatus.READING:
            raise IntakeError(f"file '{self.name}' is {self.status.value}, not reading")
        if len(data) > IntakeConfigs.MAX_FILE_BYTES:
            self.fail(f"file exceeds {IntakeConfigs.MAX_FILE_BYTES} bytes")
            return
        # Every accepted type is read as raw text
        self.content = data.decode("utf-8", errors="ignore")
        self.size = len(data)
        self.status = FileStatus.READY

    def fail(self, message: str) -> None:
        self.status = FileStatus.FAILED
        self.error = message
        self.content = ""
        logger.warning("intake_service: file '%s' failed: %s", self.name, message)

    def content_ready(self) -> SourceContent:
        if self.status == FileStatus.READY:
            return SourceContent.ready(self.content)
        if self.status == FileStatus.FAILED:
            return SourceContent.failed()
        return SourceContent.pending()

    def to_schema(self) -> UploadedFileSchema:
        return UploadedFileSchema(
            id=self.id, name=self.name, size=self.size, status=self.status.value, error=self.error
        )


class ManualTextSource:
    def __init__(self, text: str = ""):
        self.text = text

    def content_ready(self) -> SourceContent:
        return SourceContent.ready(self.text)


class DictationSession:
    """
    Voice dictation: Idle -> Recording -> Reviewing -> Accepted | Discarded.

    Cancel while recording returns to Idle with the transcript cleared. After
    accept or discard the session resets to Idle.
    """

    def __init__(self) -> None:
        self.status = DictationStatus.IDLE
        self.transcript = ""

    def _require(self, *allowed: DictationStatus) -> None:
        if self.status not in allowed:
            names = ", ".join(s.value for s in allowed)
            raise IntakeError(f"dictation is {self.status.value}, expected {names}")

    def start(self) -> None:
        self._require(DictationStatus.IDLE)
        self.transcript = ""
        self.status = DictationStatus.RECORDING

    def update_transcript(self, transcript: str) -> None:
        self._require(DictationStatus.RECORDING, DictationStatus.REVIEWING)
        self.transcript = transcript

    def stop(self) -> None:
        self._require(DictationStatus.RECORDING)
        self.status = DictationStatus.REVIEWING

    def cancel(self) -> None:
        self._require(DictationStatus.RECORDING)
        self._reset()

    def accept(self) -> str:
        self._require(DictationStatus.REVIEWING)
        text = self.transcript.strip()
        if not text:
            raise IntakeError("dictation transcript is empty")
        self.status = DictationStatus.ACCEPTED
        self._reset()
        return text

    def discard(self) -> None:
        self._require(DictationStatus.REVIEWING)
        self.status = DictationStatus.DISCARDED
        self._reset()

    def _reset(self) -> None:
        self.transcript = ""
        self.status = DictationStatus.IDLE

    def to_schema(self) -> DictationSchema:
        return DictationSchema(status=self.status.value, transcript=self.transcript)


def _speech_file_name() -> str:
    ts = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return f"{IntakeConfigs.SPEECH_FILE_PREFIX}{ts}.txt"


class IntakeSession:
    """One document-in-progress and its analysis state."""

    def __init__(self, notifier: Optional[Notifier] = None):
        self.files: List[UploadedFile] = []
        self.manual = ManualTextSource()
        self.dictation = DictationSession()
        self.project_details: Optional[ProjectDetails] = None
        self.analysis: Optional[RequirementsAnalysis] = None
        self._pending = False
        self._complete = False
        self._notify = notifier or (lambda *args, **kwargs: None)
        # Sources other than uploads (e.g. a document fetched elsewhere), after the files
        self.attached: List[DocumentSource] = []

    # ---------- channels ----------

    def _touch(self) -> None:
        self._complete = False

    def queue_file(self, name: str, size: int = 0) -> UploadedFile:
        if not is_accepted_file(name):
            accepted = ", ".join(IntakeConfigs.ACCEPTED_EXTENSIONS)
            raise IntakeError(f"unsupported file type '{name}', accepted: {accepted}")
        file = UploadedFile(name, size)
        self.files.append(file)
        self._touch()
        logger.info("intake_service: queued file '%s' (%s)", name, file.id)
        return file

    def read_file(self, file_id: str, data: bytes) -> UploadedFile:
        file = self.get_file(file_id)
        file.start_reading()
        file.finish_reading(data)
        self._touch()
        return file

    def add_file(self, name: str, data: bytes) -> UploadedFile:
        """Queue and read a file in one step."""
        file = self.queue_file(name, len(data))
        return self.read_file(file.id, data)

    def get_file(self, file_id: str) -> UploadedFile:
        for file in self.files:
            if file.id == file_id:
                return file
        raise IntakeError(f"file '{file_id}' not found")

    def remove_file(self, file_id: str) -> None:
        file = self.get_file(file_id)
        self.files.remove(file)
        self._touch()
        logger.info("intake_service: removed file '%s'", file.name)

    def set_manual_text(self, text: str) -> None:
        self.manual.text = text or ""
        self._touch()

    def accept_dictation(self) -> UploadedFile:
        text = self.dictation.accept()
        return self.add_file(_speech_file_name(), text.encode("utf-8"))

    def attach_source(self, source: DocumentSource) -> None:
        self.attached.append(source)
        self._touch()

    def file_sources(self) -> List[DocumentSource]:
        return [*self.files, *self.attached]

    def sources(self) -> List[DocumentSource]:
        """Every document source in document order; manual text comes last."""
        return [*self.file_sources(), self.manual]

    # ---------- derived state ----------

    @property
    def combined_text(self) -> str:
        ready = [c.text for c in (s.content_ready() for s in self.file_sources()) if c.state == "ready"]
        return combine_requirements(ready, self.manual.content_ready().text)

    @property
    def files_pending(self) -> bool:
        return any(s.content_ready().state == "pending" for s in self.sources())

    @property
    def status(self) -> IntakeStatus:
        if self._pending:
            return IntakeStatus.ANALYSIS_PENDING
        if self._complete:
            return IntakeStatus.ANALYSIS_COMPLETE
        # Any file counts, whatever its state; the manual source only once it has text
        has_input = bool(self.file_sources()) or bool(self.manual.content_ready().text)
        if not has_input and self.dictation.status == DictationStatus.IDLE:
            return IntakeStatus.EMPTY
        return IntakeStatus.ASSEMBLING

    @property
    def can_analyze(self) -> bool:
        return not self._pending and not self.files_pending and bool(self.combined_text.strip())

    def to_schema(self) -> IntakeStateSchema:
        return IntakeStateSchema(
            status=self.status.value,
            files=[f.to_schema() for f in self.files],
            manualText=self.manual.text,
            dictation=self.dictation.to_schema(),
            combinedText=self.combined_text,
            canAnalyze=self.can_analyze,
            projectDetails=self.project_details,
        )

    # ---------- analysis ----------

    def _check_can_analyze(self) -> str:
        if self._pending:
            raise AnalysisInProgressError("an analysis is already running")
        if self.files_pending:
            raise IntakeError("files are still being read")
        text = self.combined_text
        if not text.strip():
            raise IntakeError("requirements document is empty")
        return text

    async def analyze(self) -> AnalyzeResponse:
        """
        Parse project details for confirmation.

        When parsing fails the user is told and the analysis runs straight
        away without details.
        """
        text = self._check_can_analyze()
        self._pending = True
        details_error: Optional[FlowError] = None
        try:
            details = await actions_service.run_parse_project_details(text)
        except FlowError as e:
            details_error = e
        finally:
            self._pending = False

        if details_error is not None:
            logger.warning("intake_service: project details parsing failed, analyzing directly: %s", details_error)
            self._notify(
                "Could not parse project details",
                "Proceeding with the requirements analysis.",
                "destructive",
            )
            analysis = await self.confirm(None)
            return AnalyzeResponse(analysis=analysis, detailsError=str(details_error))

        self.project_details = details
        return AnalyzeResponse(projectDetails=details)

    async def confirm(self, details: Optional[ProjectDetails]) -> RequirementsAnalysis:
        """
        Run validation and the compliance check concurrently (all-or-fail).
        """
        text = self._check_can_analyze()
        if details is not None:
            logger.info("intake_service: confirmed project details: %s", details.model_dump())
            self.project_details = details

        self._pending = True
        tasks = [
            asyncio.ensure_future(actions_service.run_validation(text)),
            asyncio.ensure_future(
                actions_service.run_compliance_check(text, ComplianceConfigs.ANALYSIS_STANDARDS)
            ),
        ]
        try:
            validation, compliance = await asyncio.gather(*tasks)
        except Exception as e:
            for task in tasks:
                task.cancel()
            logger.error("intake_service: requirements analysis failed: %s", e)
            self._notify("Analysis Failed", str(e), "destructive")
            raise
        finally:
            self._pending = False

        self.analysis = RequirementsAnalysis(
            validation=validation,
            compliance=compliance,
            requirements=text,
            projectDetails=self.project_details,
        )
        self._complete = True
        self._notify("Analysis Complete", "Requirements analysis is ready on the next screen.")
        logger.info(
            "intake_service: analysis complete (chars=%d, isValid=%s)",
            len(text), validation.completenessValidation.isValid,
        )
        return self.analysis
