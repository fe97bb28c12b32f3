"""
OpenAI LLM client used to back language-model decisions.
"""

import os
from typing import Any, Dict, List, Optional

from loguru import logger
from openai import OpenAI

from ..agent.models import Message


class OpenAIClient:
    """
    LLMClient for OpenAI-compatible chat completion APIs.

    Decision prompts expect one short JSON object back, so requests default
    to ``temperature=0`` and a small completion budget. Both can be
    overridden per client or per call.

    Example:
        ```python
        client = OpenAIClient(model="gpt-4o-mini")
        decider = LLMDecisionProvider(llm_client=client)
        ```
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.0,
        max_tokens: Optional[int] = 256,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        """
        Args:
            api_key: API key; OPENAI_API_KEY is used when omitted
            model: Chat model answering decision prompts
            base_url: API base URL, for OpenAI-compatible gateways
            temperature: Sampling temperature sent with every request
            max_tokens: Completion budget per request; None leaves it to the server
            default_headers: Extra headers for every request

        Raises:
            ValueError: If no API key is given and OPENAI_API_KEY is not set
        """
        resolved_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not resolved_key:
            raise ValueError(
                "OpenAI API key must be provided either as 'api_key' parameter "
                "or via OPENAI_API_KEY environment variable"
            )

        self.client = OpenAI(
            api_key=resolved_key, base_url=base_url, default_headers=default_headers
        )
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _request_options(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        options: Dict[str, Any] = {"temperature": self.temperature}
        if self.max_tokens is not None:
            options["max_tokens"] = self.max_tokens
        options.update(overrides)
        return options

    def call(self, messages: List[Message], **kwargs) -> str:
        """
        Send ``messages`` and return the reply text.

        Keyword arguments override the client's request defaults.

        Returns:
            The reply content, or an empty string when the model returned none
        """
        options = self._request_options(kwargs)
        logger.debug(f"Requesting {self.model} with {len(messages)} message(s)")

        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[message.model_dump() for message in messages],
            **options,
        )

        if completion.usage is not None:
            logger.debug(f"{self.model} used {completion.usage.total_tokens} token(s)")
        return completion.choices[0].message.content or ""
