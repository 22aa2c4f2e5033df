"""Pydantic models for API request/response payloads.

Payloads use camelCase on the wire. Required request fields are declared
optional so the endpoints can answer a missing field with 400 themselves.
"""

from __future__ import annotations
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from code_analysis.types import ParserOptions, SourceType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeOptions(CamelModel):
    include_comments: bool = False
    include_private: bool = False
    source_type: Literal["module", "script"] = "module"

    def to_parser_options(self) -> ParserOptions:
        return ParserOptions(
            include_comments=self.include_comments,
            include_private=self.include_private,
            source_type=SourceType(self.source_type),
        )


class AnalyzeRequest(CamelModel):
    """Request payload for POST /code/analyze."""

    file_path: str | None = None
    code: str | None = None
    options: AnalyzeOptions | None = None


class AnalyzeResponse(CamelModel):
    success: bool
    result: dict[str, Any]
    language: str
    stats: dict[str, int]


class ScanRequest(CamelModel):
    """Request payload for POST /projects/scan.

    - project_id: registry key the scanned files are stored under
    - project_path: directory to scan
    - include_content: store file content in the registry
    - max_file_size: content size limit in bytes
    """

    project_id: str | None = None
    project_path: str | None = None
    include_content: bool = False
    max_file_size: int | None = Field(default=None, ge=0)


class ScanStats(CamelModel):
    total_files: int
    total_folders: int
    total_size: int
    added: int
    modified: int
    deleted: int
    indexed: int


class ScanResponse(CamelModel):
    success: bool
    stats: ScanStats
    files: list[dict[str, Any]]


class FileDependenciesResponse(CamelModel):
    success: bool
    dependencies: list[str]
    dependents: list[str]


class ProjectGraphResponse(CamelModel):
    success: bool
    graph: dict[str, list[Any]]


class HealthResponse(BaseModel):
    status: str
