"""
LLM client implementations.
"""

from .openai_client import OpenAIClient

__all__ = ["OpenAIClient"]
