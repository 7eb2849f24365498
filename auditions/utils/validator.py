import json
import re
import logging
from typing import Dict, Any, Type
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


def validate_and_repair_json(
    json_str: str,
    expected_model: Type[BaseModel]
) -> Dict[str, Any]:
    """
    Validate LLM JSON output and attempt repair if broken
    """

    try:
        data = json.loads(json_str)
        data = normalize_json_fields(data, expected_model)
        validated = expected_model(**data)
        return validated.model_dump()
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON, attempting repair: {e}")
    except (ValidationError, TypeError) as e:
        logger.warning(f"Validation failed on first attempt: {e}")

    # Clean common issues
    cleaned = clean_json_string(json_str)

    try:
        data = json.loads(cleaned)
        data = normalize_json_fields(data, expected_model)
        validated = expected_model(**data)
        logger.info("JSON repaired successfully after cleaning")
        return validated.model_dump()
    except (json.JSONDecodeError, ValidationError, TypeError):
        logger.warning("Cleaning failed, attempting to extract the JSON body")

    # Pull the outermost object or array out of surrounding prose
    try:
        data = json.loads(extract_json_body(cleaned))
        data = normalize_json_fields(data, expected_model)
        validated = expected_model(**data)
        logger.info("JSON extracted from surrounding text successfully")
        return validated.model_dump()
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        logger.error(f"All repair attempts failed: {e}")
        raise ValueError(f"Cannot parse or repair JSON: {e}")


def clean_json_string(json_str: str) -> str:
    """
    Clean common JSON formatting issues from LLM output
    """
    # Remove markdown code blocks
    cleaned = re.sub(r'```json\s*', '', json_str)
    cleaned = re.sub(r'```\s*', '', cleaned)

    # Remove leading/trailing whitespace
    cleaned = cleaned.strip()

    # Fix trailing commas before closing brackets
    cleaned = re.sub(r',(\s*[}\]])', r'\1', cleaned)

    # Remove comments (single line and multi-line)
    cleaned = re.sub(r'^\s*//.*?$', '', cleaned, flags=re.MULTILINE)
    cleaned = re.sub(r'/\*.*?\*/', '', cleaned, flags=re.DOTALL)

    return cleaned


def extract_json_body(text: str) -> str:
    """
    Return the span from the first opening bracket to its last closing one
    """
    match = re.search(r'[\[{]', text)
    if not match:
        raise json.JSONDecodeError("No JSON body found", text, 0)

    start = match.start()
    closing = '}' if text[start] == '{' else ']'
    end = text.rfind(closing)
    if end <= start:
        raise json.JSONDecodeError("Unterminated JSON body", text, start)
    return text[start:end + 1]


def coerce_num(val):
    """Convert numeric-like strings ("20", "20 points") to numbers"""
    if isinstance(val, (int, float)):
        return val
    if isinstance(val, str):
        m = re.search(r"(-?\d+(?:\.\d+)?)", val)
        if m:
            num_str = m.group(1)
            if "." in num_str:
                return float(num_str)
            return int(num_str)
    return val


def normalize_json_fields(data: Any, expected_model: Type[BaseModel]) -> Dict[str, Any]:
    """
    Normalize common LLM JSON deviations:
    - Wrap a bare list into the model's single list field
    - Convert numeric-like max scores to numbers
    - Accept snake_case / alternative keys for criterion items
    - Drop criterion items with no name or no numeric max score
    - Trim text and drop blank strings from string lists
    """
    if isinstance(data, list):
        list_fields = list(expected_model.model_fields.keys())
        if len(list_fields) != 1:
            raise TypeError(f"Cannot wrap bare list for {expected_model.__name__}")
        data = {list_fields[0]: data}

    if not isinstance(data, dict):
        raise TypeError(f"Expected JSON object, got {type(data).__name__}")

    if isinstance(data.get("criteria"), list):
        items = []
        for item in data["criteria"]:
            if not isinstance(item, dict):
                continue
            name = str(item.get("criterion") or item.get("name") or "").strip()
            max_score = coerce_num(item.get("maxScore", item.get("max_score", item.get("score"))))
            if not name or isinstance(max_score, bool) or not isinstance(max_score, (int, float)):
                logger.warning(f"Dropping unusable criterion item: {item}")
                continue
            items.append({"criterion": name, "maxScore": max_score})
        data["criteria"] = items

    if isinstance(data.get("questions"), list):
        data["questions"] = [
            str(q).strip() for q in data["questions"]
            if q is not None and str(q).strip()
        ]

    return data
