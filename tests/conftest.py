"""
Test configuration and fixtures for pytest.
"""

from typing import List, Optional

import pytest
from pydantic import BaseModel

from flowpilot.agent.actions import Action, NoParams, create_action
from flowpilot.agent.context import RunContext
from flowpilot.agent.decision import ScriptedDecisionProvider
from flowpilot.agent.models import ActionReturn, Message


class CountingBody:
    """Action body that records how often it ran."""

    def __init__(self, done: bool, result: str):
        self.done = done
        self.result = result
        self.calls = 0
        self.received: List[BaseModel] = []

    def __call__(self, params: BaseModel) -> ActionReturn:
        self.calls += 1
        self.received.append(params)
        return ActionReturn(done=self.done, result=self.result)


class MockLLMClient:
    """Mock LLM client for testing."""

    def __init__(self, responses: Optional[List[str]] = None):
        self.responses = responses or []
        self.call_count = 0
        self.calls = []

    def call(self, messages: List[Message], **kwargs) -> str:
        """Record the invocation and return the next preset response."""
        self.calls.append({"messages": messages, "kwargs": kwargs})

        if self.call_count < len(self.responses):
            response = self.responses[self.call_count]
            self.call_count += 1
            return response

        return '```json\n{"index": 0}\n```'


@pytest.fixture
def counting_action():
    """
    Factory for call-counting stub actions.

    Returns a function ``(name, done=False, result=None, params=NoParams)``
    that builds an Action and the CountingBody behind it.
    """

    def _create(name: str, done: bool = False, result: Optional[str] = None, params=NoParams):
        body = CountingBody(done=done, result=result if result is not None else f"{name} ran")
        action = create_action(
            name=name,
            description=f"{name} test action",
            execute=body,
            params=params,
        )
        return action, body

    return _create


@pytest.fixture
def scripted_context():
    """Factory building a RunContext around a ScriptedDecisionProvider."""

    def _create(selections=(), conditions=()) -> RunContext:
        return RunContext(
            decider=ScriptedDecisionProvider(selections=selections, conditions=conditions)
        )

    return _create


@pytest.fixture
def respond_action() -> Action:
    """The canonical terminating action: always answers "hi"."""
    return create_action(
        name="Respond",
        description="Responds to the user",
        execute=lambda _: ActionReturn(done=True, result="hi"),
    )


@pytest.fixture
def mock_llm_client_with_responses():
    """Fixture factory for mock LLM client with custom responses."""

    def _create_client(responses: List[str]):
        return MockLLMClient(responses=responses)

    return _create_client
