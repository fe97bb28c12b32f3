"""
Prompt templates for the language-model decision provider.
"""

import json
from typing import Optional, Sequence

from .models import CapabilityInfo, CapabilitySelection, ConditionVerdict, DecisionContext

DEFAULT_INSTRUCTIONS = "You are the decision step of a customer-facing agent."


def build_system_prompt(custom_instructions: Optional[str] = None) -> str:
    """
    Build the system prompt sent with every decision request.

    Parameters:
        custom_instructions (Optional[str]): Text placed at the top of the prompt;
            a generic instruction is used when omitted.

    Returns:
        str: System prompt embedding the JSON schemas of both answer types.
    """
    selection_schema = json.dumps(CapabilitySelection.model_json_schema(), indent=2)
    verdict_schema = json.dumps(ConditionVerdict.model_json_schema(), indent=2)

    return f"""{custom_instructions or DEFAULT_INSTRUCTIONS}

{"=" * 60}

RESPONSE FORMAT INSTRUCTIONS:

You MUST ALWAYS respond with a single JSON object wrapped in a ```json code block.

When asked to choose a capability, answer with:
{selection_schema}

When asked to evaluate a condition, answer with:
{verdict_schema}
"""


def _format_history(context: DecisionContext) -> str:
    if not context.history:
        return "(no history yet)"
    return "\n".join(f"{i}. {message}" for i, message in enumerate(context.history, 1))


def build_selection_prompt(
    candidates: Sequence[CapabilityInfo], context: DecisionContext
) -> str:
    """Render the candidate list and run history as a selection request."""
    lines = ["AVAILABLE CAPABILITIES:", ""]
    for index, candidate in enumerate(candidates):
        lines.append(f"[{index}] {candidate.tag}: {candidate.name}")
        lines.append(f"    Description: {candidate.description}")
        if candidate.parameters:
            lines.append(f"    Parameters: {json.dumps(candidate.parameters)}")
    lines.extend(
        [
            "",
            "HISTORY:",
            _format_history(context),
            "",
            f"Choose exactly one capability by its index (0 to {len(candidates) - 1}).",
        ]
    )
    return "\n".join(lines)


def build_condition_prompt(condition: str, context: DecisionContext) -> str:
    """Render a condition and the run history as an evaluation request."""
    return "\n".join(
        [
            f"CONDITION: {condition}",
            "",
            "HISTORY:",
            _format_history(context),
            "",
            f"CONTEXT: {json.dumps(context.context, default=str)}",
            "",
            "Decide whether the condition is currently true.",
        ]
    )
