"""
Parse the model's free-form answer into DocumentIntelligence
"""

import json

from json_repair import repair_json
from pydantic import ValidationError

from .errors import JsonDecodeError, JsonRepairError
from .models import DocumentIntelligence


def strip_code_fences(text: str) -> str:
    """Remove Markdown ``` markers (with or without a json tag)"""
    return text.replace("```json", "").replace("```", "").strip()


def repair(text: str) -> str:
    """Coerce near-valid JSON into a valid JSON object string.

    Balances braces, brackets and quotes, drops trailing commas and any prose
    around the object. Raises JsonRepairError when no object can be salvaged.
    """
    try:
        repaired = repair_json(text, return_objects=True)
    except (ValueError, RecursionError) as e:
        raise JsonRepairError(text, str(e)) from e

    if not isinstance(repaired, dict):
        raise JsonRepairError(text, "no JSON object found")
    return json.dumps(repaired, ensure_ascii=False)


def decode(text: str, original_text: str = "") -> DocumentIntelligence:
    """Decode a JSON object string; extra fields are ignored, missing ones are None"""
    try:
        return DocumentIntelligence.model_validate_json(text)
    except ValidationError as e:
        reason = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'root'}: {err['msg']}"
            for err in e.errors()
        )
        raise JsonDecodeError(original_text or text, text, reason) from e


class ResponseParser:
    """Fence stripping, JSON repair and schema decoding, in that order"""

    @staticmethod
    def parse(llm_response: str) -> DocumentIntelligence:
        cleaned = strip_code_fences(llm_response)
        try:
            repaired = repair(cleaned)
        except JsonRepairError as e:
            raise JsonRepairError(llm_response, e.reason) from e
        return decode(repaired, original_text=llm_response)
