"""
Protocols for language model clients.

This module defines the interface an LLM backend must implement to be used
by the language-model decision provider.
"""

from typing import List, Protocol

from .models import Message


class LLMClient(Protocol):
    """
    Protocol for LLM client implementations.

    Any LLM client (OpenAI, Anthropic, local models, etc.) must implement
    this protocol to back an LLMDecisionProvider.
    """

    def call(self, messages: List[Message], **kwargs) -> str:
        """
        Make a synchronous call to the LLM.

        Args:
            messages: List of conversation messages
            **kwargs: Additional LLM-specific parameters

        Returns:
            The LLM's response as a string

        Raises:
            Exception: If the LLM call fails
        """
        ...
