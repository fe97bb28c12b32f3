"""
Decision providers.

A decision provider chooses which capability an Agent runs next and decides
the branch taken by ``do_if``. The orchestration core only depends on the
DecisionProvider protocol; this module ships a random provider, a scripted
provider and a provider backed by a language model.
"""

import random
from typing import Iterable, List, Optional, Protocol, Sequence

from loguru import logger

from .client import LLMClient
from .exceptions import DecisionError
from .models import CapabilityInfo, DecisionContext, Message
from .parser import DecisionParser
from .prompts import build_condition_prompt, build_selection_prompt, build_system_prompt
from .retry import RetryConfig


class DecisionProvider(Protocol):
    """Protocol for anything that can steer an Agent or a Flow."""

    def select_capability(
        self, candidates: Sequence[CapabilityInfo], context: DecisionContext
    ) -> int:
        """
        Pick one candidate.

        Returns:
            int: Zero-based index into ``candidates``. Returning an index outside
            the range is a defect and terminates the run.
        """
        ...

    def evaluate_condition(self, condition: str, context: DecisionContext) -> bool:
        """Decide whether a natural-language condition holds."""
        ...


class RandomDecisionProvider:
    """Chooses uniformly at random; useful for demos and smoke runs."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def select_capability(
        self, candidates: Sequence[CapabilityInfo], context: DecisionContext
    ) -> int:
        return self._random.randrange(len(candidates))

    def evaluate_condition(self, condition: str, context: DecisionContext) -> bool:
        return self._random.random() > 0.5


class ScriptedDecisionProvider:
    """
    Replays a fixed sequence of answers.

    Selections and condition verdicts are consumed in order from two
    independent scripts. Running out of either raises DecisionError.

    Example:
        ```python
        decider = ScriptedDecisionProvider(selections=[0, 1], conditions=[True])
        ```
    """

    def __init__(
        self,
        selections: Iterable[int] = (),
        conditions: Iterable[bool] = (),
    ):
        self._selections: List[int] = list(selections)
        self._conditions: List[bool] = list(conditions)
        self.selection_calls: List[List[CapabilityInfo]] = []
        self.condition_calls: List[str] = []

    def select_capability(
        self, candidates: Sequence[CapabilityInfo], context: DecisionContext
    ) -> int:
        self.selection_calls.append(list(candidates))
        if not self._selections:
            raise DecisionError("Scripted selections exhausted")
        return self._selections.pop(0)

    def evaluate_condition(self, condition: str, context: DecisionContext) -> bool:
        self.condition_calls.append(condition)
        if not self._conditions:
            raise DecisionError(f"Scripted conditions exhausted at '{condition}'")
        return self._conditions.pop(0)


class LLMDecisionProvider:
    """
    Decision provider that asks a language model.

    Each request is a system prompt plus one user message describing the
    choice. The client call is retried with tenacity; a call that still
    fails, an answer that cannot be parsed, or an index outside the candidate
    range raises DecisionError.

    Example:
        ```python
        decider = LLMDecisionProvider(
            llm_client=OpenAIClient(model="gpt-4o-mini"),
            retry_config=RetryConfig(max_attempts=2),
        )
        ```
    """

    def __init__(
        self,
        llm_client: LLMClient,
        retry_config: Optional[RetryConfig] = None,
        system_prompt: Optional[str] = None,
    ):
        """
        Parameters:
            llm_client (LLMClient): Client used for all model calls.
            retry_config (Optional[RetryConfig]): Retry policy for client calls; a default is created when omitted.
            system_prompt (Optional[str]): Custom instructions placed at the top of the system prompt.
        """
        self.llm_client = llm_client
        self.retry_config = retry_config or RetryConfig()
        self.system_prompt = build_system_prompt(system_prompt)
        self.parser = DecisionParser()

    def _call_llm_with_retry(self, prompt: str) -> str:
        """
        Send ``prompt`` to the model with retry handling.

        Raises:
            DecisionError: If the call fails after the configured number of attempts.
        """
        messages = [
            Message(role="system", content=self.system_prompt),
            Message(role="user", content=prompt),
        ]

        def _call():
            logger.debug("Calling LLM for a decision...")
            result = self.llm_client.call(messages)
            logger.debug("LLM call completed")
            return result

        try:
            wrapped_func = self.retry_config.wrap_function(_call)
            return wrapped_func()
        except Exception as e:
            logger.error(
                f"LLM call failed after {self.retry_config.max_attempts} attempts: {e}"
            )
            raise DecisionError(
                f"LLM call failed after {self.retry_config.max_attempts} attempts", e
            ) from e

    def select_capability(
        self, candidates: Sequence[CapabilityInfo], context: DecisionContext
    ) -> int:
        response = self._call_llm_with_retry(build_selection_prompt(candidates, context))
        selection = self.parser.parse_selection(response)

        if not 0 <= selection.index < len(candidates):
            raise DecisionError(
                f"LLM selected index {selection.index} but only "
                f"{len(candidates)} capabilities are available"
            )

        logger.info(
            f"LLM selected {candidates[selection.index].tag} "
            f"'{candidates[selection.index].name}'"
        )
        return selection.index

    def evaluate_condition(self, condition: str, context: DecisionContext) -> bool:
        response = self._call_llm_with_retry(build_condition_prompt(condition, context))
        return self.parser.parse_verdict(response).result
