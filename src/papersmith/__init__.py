"""
papersmith - classify and rename PDF documents with a vision-language model.

Main package initialization.
"""

__version__ = "0.4.0"

from .errors import (
    ApiError,
    ConfigError,
    DocumentError,
    EnumerationError,
    FatalError,
    JsonDecodeError,
    JsonRepairError,
    MalformedResponseError,
    PapersmithError,
    ReadError,
    RenameError,
    RenderError,
    TransportError,
)
from .file_collector import FileCollector, is_already_processed
from .llm_client import ChatCompletionsClient, IntelligenceClient, ResponsesClient
from .models import CandidateFile, DocumentIntelligence, RenderedDocument
from .pdf_utils import ImageStitchRenderer, PdfBytesRenderer, stitch_pages
from .prompts import PromptBuilder, PromptTemplate
from .renamer import PDFRenamer
from .response_parser import ResponseParser

__all__ = [
    "ApiError",
    "CandidateFile",
    "ChatCompletionsClient",
    "ConfigError",
    "DocumentError",
    "DocumentIntelligence",
    "EnumerationError",
    "FatalError",
    "FileCollector",
    "ImageStitchRenderer",
    "IntelligenceClient",
    "JsonDecodeError",
    "JsonRepairError",
    "MalformedResponseError",
    "PDFRenamer",
    "PapersmithError",
    "PdfBytesRenderer",
    "PromptBuilder",
    "PromptTemplate",
    "ReadError",
    "RenameError",
    "RenderError",
    "RenderedDocument",
    "ResponseParser",
    "ResponsesClient",
    "TransportError",
    "is_already_processed",
    "stitch_pages",
]
