"""
Core models for the Flowpilot orchestration core.

This module contains Pydantic models for action results, flow step results,
the payloads exchanged with decision providers, and loop configuration.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """
    Represents a message sent to a language model.

    Attributes:
        role: The role of the message sender (user, assistant, or system)
        content: The actual message content
    """

    role: Literal["user", "assistant", "system"]
    content: str


class ActionReturn(BaseModel):
    """
    Result of running an Action, Workflow or Agent.

    ``done=True`` is the only termination signal: once produced it is passed
    upward unchanged and ends every enclosing flow and agent loop.

    Attributes:
        done: Whether the enclosing procedure should stop
        result: Textual outcome of the step
    """

    model_config = ConfigDict(frozen=True)

    done: bool = Field(..., description="Whether this result terminates the run")
    result: str = Field(..., description="Textual outcome of the step")


class FlowResult(BaseModel):
    """
    Result of executing one Flow.

    Attributes:
        done: Whether the flow reached a terminating step
        result: Textual outcome of the last step that ran
        next_state: Opaque state token threaded between steps
    """

    model_config = ConfigDict(frozen=True)

    done: bool
    result: str
    next_state: Any = None

    def to_action_return(self) -> ActionReturn:
        """Drop the state token and keep the done/result pair."""
        return ActionReturn(done=self.done, result=self.result)


CapabilityTag = Literal["Action", "Workflow", "Agent"]


class CapabilityInfo(BaseModel):
    """
    Description of one candidate capability shown to a decision provider.

    Attributes:
        tag: Kind of capability (Action, Workflow or Agent)
        name: Capability name
        description: Capability description
        parameters: JSON schema of the action's parameters, None for workflows and agents
    """

    tag: CapabilityTag
    name: str
    description: str
    parameters: Optional[Dict[str, Any]] = None


class DecisionContext(BaseModel):
    """
    Snapshot of the run state handed to a decision provider.

    Attributes:
        history: Messages recorded so far, oldest first
        context: Merged execution context
    """

    history: List[str] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)


class CapabilitySelection(BaseModel):
    """Structured answer expected from a language model choosing a capability."""

    thought: Optional[str] = Field(None, description="Reasoning behind the choice")
    index: int = Field(..., description="Zero-based index of the chosen capability")


class ConditionVerdict(BaseModel):
    """Structured answer expected from a language model evaluating a condition."""

    thought: Optional[str] = Field(None, description="Reasoning behind the verdict")
    result: bool = Field(..., description="Whether the condition holds")


class LoopConfig(BaseModel):
    """
    Loop budgets for an Agent.

    Attributes:
        default_max_loops: Budget used when execute() is called without max_loops
        sub_agent_max_loops: Fixed budget given to every delegated sub-agent
    """

    default_max_loops: int = Field(
        default=10, ge=0, description="Default number of loop iterations"
    )
    sub_agent_max_loops: int = Field(
        default=5, ge=0, description="Loop budget for delegated sub-agents"
    )
