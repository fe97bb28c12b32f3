"""
Response parser for language-model decisions.

This module extracts JSON from LLM responses (optionally wrapped in markdown
code fences) and validates it into CapabilitySelection or ConditionVerdict.
"""

import json
import re
from typing import Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from .exceptions import DecisionError
from .models import CapabilitySelection, ConditionVerdict

T = TypeVar("T", bound=BaseModel)


class DecisionParser:
    """
    Parse LLM responses into structured decision models.

    Unlike a chat response there is no sensible fallback for a decision, so
    anything that does not validate raises DecisionError.
    """

    @staticmethod
    def parse_selection(response_text: str) -> CapabilitySelection:
        """Parse a capability selection answer."""
        return DecisionParser._parse(response_text, CapabilitySelection)

    @staticmethod
    def parse_verdict(response_text: str) -> ConditionVerdict:
        """Parse a condition verdict answer."""
        return DecisionParser._parse(response_text, ConditionVerdict)

    @staticmethod
    def _parse(response_text: str, model: Type[T]) -> T:
        """
        Extract JSON from ``response_text`` and validate it against ``model``.

        Parameters:
            response_text (str): Raw text from the LLM.
            model (Type[BaseModel]): Model to validate the JSON object with.

        Returns:
            The validated model instance.

        Raises:
            DecisionError: If the text holds no valid JSON or the JSON does not match ``model``.
        """
        json_text = DecisionParser._extract_json_from_markdown(response_text or "")
        try:
            data = json.loads(json_text)
            parsed = model.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse {model.__name__}: {e}")
            logger.debug(f"Raw response text: {json_text[:200]}...")
            raise DecisionError(f"Could not parse {model.__name__} from LLM response", e) from e

        logger.debug(f"Parsed as {model.__name__}")
        return parsed

    @staticmethod
    def _extract_json_from_markdown(text: str) -> str:
        """
        Extract JSON content from a markdown code block if present.

        Parameters:
            text (str): Text that may contain a fenced code block with JSON.

        Returns:
            str: The fenced content, or the original trimmed text if no fence is found.
        """
        text = text.strip()

        pattern = r"^```(?:json)?\s*\n(.*?)\n```\s*$"
        match = re.search(pattern, text, re.DOTALL | re.MULTILINE)
        if match:
            logger.debug("Extracted JSON from markdown code block")
            return match.group(1).strip()

        # single line fence
        pattern = r"^```(?:json)?\s*(.*?)```\s*$"
        match = re.search(pattern, text, re.DOTALL)
        if match:
            logger.debug("Extracted JSON from inline markdown code block")
            return match.group(1).strip()

        return text
