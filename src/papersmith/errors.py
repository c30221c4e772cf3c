"""
Error taxonomy for papersmith

Fatal errors abort the run before any file is touched. Document errors are
scoped to a single PDF: they are reported and the run moves on.
"""

from typing import Optional


class PapersmithError(Exception):
    """Base exception for papersmith"""


class FatalError(PapersmithError):
    """Error that aborts the whole run"""


class ConfigError(FatalError):
    """Missing glob pattern, credential or other required setting"""


class EnumerationError(FatalError):
    """Glob pattern is invalid or a matched entry is unreadable"""


class DocumentError(PapersmithError):
    """Error scoped to one document"""


class RenderError(DocumentError):
    """PDF could not be rendered into a composite image"""


class ReadError(DocumentError):
    """PDF bytes could not be read, or the file is empty"""


class ApiError(DocumentError):
    """The endpoint rejected the request with a structured error body"""

    def __init__(
        self,
        status: int,
        type: Optional[str],
        message: str,
        code: Optional[str] = None,
        param: Optional[str] = None,
    ):
        self.status = status
        self.type = type
        self.message = message
        self.code = code
        self.param = param
        super().__init__(f"API error {status} ({type or 'unknown'}): {message}")


class TransportError(DocumentError):
    """The endpoint call failed and no structured error could be decoded"""

    def __init__(self, status: Optional[int], raw_body: str):
        self.status = status
        self.raw_body = raw_body
        label = f"HTTP {status}" if status is not None else "Connection failed"
        super().__init__(f"{label}: {raw_body[:500]}")


class MalformedResponseError(DocumentError):
    """Successful response without any usable answer text"""

    def __init__(self, reason: str, raw_body: str = ""):
        self.reason = reason
        self.raw_body = raw_body
        super().__init__(reason)


class JsonRepairError(DocumentError):
    """Model answer could not be coerced into a JSON object"""

    def __init__(self, original_text: str, reason: str = ""):
        self.original_text = original_text
        self.reason = reason
        message = "Could not repair model answer into JSON"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(f"{message}. Model answer: {original_text!r}")


class JsonDecodeError(DocumentError):
    """Repaired JSON does not fit the document intelligence schema"""

    def __init__(self, original_text: str, repaired_text: str, reason: str = ""):
        self.original_text = original_text
        self.repaired_text = repaired_text
        super().__init__(
            f"Failed to decode model answer ({reason}): {original_text!r}. "
            f"Repaired JSON: {repaired_text!r}"
        )


class RenameError(DocumentError):
    """Filesystem rename failed"""
