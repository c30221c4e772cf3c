"""
Data shapes passed between pipeline stages
"""

import base64
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictStr


class DocumentIntelligence(BaseModel):
    """Date, category and suggested filename extracted from one document"""

    model_config = ConfigDict(extra="ignore", frozen=True)

    date: Optional[StrictStr] = None
    category: Optional[StrictStr] = None
    filename: Optional[StrictStr] = None


@dataclass(frozen=True)
class CandidateFile:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class RenderedDocument:
    """Either a stitched PNG composite or the verbatim PDF bytes"""

    kind: str  # "image" or "pdf"
    data: bytes
    mime_type: str
    filename: str

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode()

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


@dataclass(frozen=True)
class ContentPart:
    kind: str  # "text", "image" or "file"
    text: Optional[str] = None
    document: Optional[RenderedDocument] = None


@dataclass(frozen=True)
class IntelligenceRequest:
    """Model-agnostic request: a model id and a single user turn"""

    model: str
    parts: Tuple[ContentPart, ...] = field(default_factory=tuple)

    @property
    def prompt(self) -> str:
        return next(p.text for p in self.parts if p.kind == "text")

    @property
    def document(self) -> RenderedDocument:
        return next(p.document for p in self.parts if p.kind != "text")


@dataclass
class ProcessResult:
    path: Path
    status: str  # "renamed", "dry_run", "no_action" or "failed"
    new_name: Optional[str] = None
    error: Optional[str] = None


# Endpoint response envelopes. Every field is optional unless the API
# guarantees it; missing pieces are mapped to named errors by the client.


class ApiErrorDetail(BaseModel):
    type: Optional[str] = None
    message: str
    code: Optional[Union[str, int]] = None
    param: Optional[str] = None


class ApiErrorBody(BaseModel):
    error: ApiErrorDetail


class ChatMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None


class ChatChoice(BaseModel):
    index: Optional[int] = None
    message: Optional[ChatMessage] = None


class ChatCompletionResponse(BaseModel):
    choices: List[ChatChoice] = []


class OutputContent(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None


class OutputItem(BaseModel):
    type: Optional[str] = None
    role: Optional[str] = None
    content: Optional[List[OutputContent]] = None


class ResponsesResponse(BaseModel):
    output: List[OutputItem] = []
