from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from complyscan.model import AnnotationRecord


class AnnotationRecordDTO(BaseModel):
    tag: str
    directory: str
    source_file: Optional[str] = None
    function_name: Optional[str] = None
    line_number: Optional[int] = None
    standard_ids: List[str] = []

    @classmethod
    def from_record(cls, record: AnnotationRecord) -> "AnnotationRecordDTO":
        return cls(
            tag=record.tag_kind.tag,
            directory=record.directory,
            source_file=record.source_file,
            function_name=record.function_name,
            line_number=record.line_number,
            standard_ids=list(record.standard_ids),
        )


class AnnotationsResponse(BaseModel):
    package: str
    annotations: List[AnnotationRecordDTO]
    diagnostics: List[str] = []


class ReportPayloadDTO(BaseModel):
    package: str
    remote: Optional[str] = None
    branch: str
    annotations: List[AnnotationRecordDTO] = []
    missing: Dict[str, List[str]] = {}
    diagnostics: List[str] = []
    markdown: str
    file: Optional[str] = None
