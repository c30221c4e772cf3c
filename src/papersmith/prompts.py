"""
Instruction text and request packaging
"""

from dataclasses import dataclass

from .models import CandidateFile, ContentPart, IntelligenceRequest, RenderedDocument

FILENAME_TOKEN = "{original_filename}"

PROMPT = """
1). When is the document dated (if any)?
2). What is the document? Eg, invoice, receipt, etc.
3). What should the document title be (if any)?
4). What would be a good filename for this document, use the format {YYYYMMDD}-{title}-{category}.

Output your response as JSON, eg:
{
    "date": "2020-12-24",  // Use the format YYYY-MM-DD
    "category": "invoice",  // Keep the category in lowercase
    "filename": "20201224-dan-murphys-invoice"  // All lowercase, no spaces. Words separated by hyphens.
}
"""

FILENAME_AWARE_PROMPT = """
1). When is the document dated (if any)?
2). What is the document? Eg, invoice, receipt, etc.
3). What should the document title be (if any)?
4). What would be a good filename for this document, use the format {YYYYMMDD}-{title}-{category}.

The current filename is "{original_filename}". It may contain hints, but prefer
what you can see in the document itself.

Output your response as JSON, eg:
{
    "date": "2020-12-24",  // Use the format YYYY-MM-DD
    "category": "invoice",  // Keep the category in lowercase
    "filename": "20201224-dan-murphys-invoice"  // All lowercase, no spaces. Words separated by hyphens.
}
"""


@dataclass(frozen=True)
class PromptTemplate:
    text: str

    @classmethod
    def default(cls, filename_hint: bool = False) -> "PromptTemplate":
        return cls(FILENAME_AWARE_PROMPT if filename_hint else PROMPT)

    def render(self, original_filename: str) -> str:
        # Literal replacement: the braces in the example JSON must survive
        return self.text.replace(FILENAME_TOKEN, original_filename)


class PromptBuilder:
    """Package the prompt and one rendered document into a request"""

    def __init__(self, template: PromptTemplate, model: str):
        self.template = template
        self.model = model

    def build(
        self, candidate: CandidateFile, rendered: RenderedDocument
    ) -> IntelligenceRequest:
        text_part = ContentPart(kind="text", text=self.template.render(candidate.name))

        if rendered.kind == "image":
            parts = (text_part, ContentPart(kind="image", document=rendered))
        elif rendered.kind == "pdf":
            parts = (ContentPart(kind="file", document=rendered), text_part)
        else:
            raise ValueError(f"Unknown document kind: {rendered.kind}")

        return IntelligenceRequest(model=self.model, parts=parts)
