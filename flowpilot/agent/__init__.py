"""
Agent subpackage - actions, flows, workflows and recursive agents.
"""

from .actions import Action, NoParams, create_action
from .agent import (
    ActionCapability,
    Agent,
    AgentCapability,
    Capability,
    WorkflowCapability,
    create_agent,
)
from .client import LLMClient
from .context import RunContext
from .decision import (
    DecisionProvider,
    LLMDecisionProvider,
    RandomDecisionProvider,
    ScriptedDecisionProvider,
)
from .exceptions import (
    ActionExecutionError,
    AgentError,
    AgentExecutionError,
    CapabilityDefect,
    DecisionError,
    FlowExecutionError,
    InvalidCapabilityError,
    ParseError,
)
from .flow import Flow, FlowBuilder, FlowStep, and_then, do_if, first, no_op, pipe
from .models import (
    ActionReturn,
    CapabilityInfo,
    CapabilitySelection,
    ConditionVerdict,
    DecisionContext,
    FlowResult,
    LoopConfig,
    Message,
)
from .parser import DecisionParser
from .retry import RetryConfig
from .state import AgentState
from .workflow import Workflow, create_workflow

__all__ = [
    "Action",
    "NoParams",
    "create_action",
    "Agent",
    "create_agent",
    "Capability",
    "ActionCapability",
    "WorkflowCapability",
    "AgentCapability",
    "Workflow",
    "create_workflow",
    "Flow",
    "FlowBuilder",
    "FlowStep",
    "first",
    "and_then",
    "do_if",
    "no_op",
    "pipe",
    "AgentState",
    "RunContext",
    "DecisionProvider",
    "RandomDecisionProvider",
    "ScriptedDecisionProvider",
    "LLMDecisionProvider",
    "DecisionParser",
    "LLMClient",
    "RetryConfig",
    "ActionReturn",
    "FlowResult",
    "CapabilityInfo",
    "CapabilitySelection",
    "ConditionVerdict",
    "DecisionContext",
    "LoopConfig",
    "Message",
    "AgentError",
    "ParseError",
    "ActionExecutionError",
    "FlowExecutionError",
    "AgentExecutionError",
    "DecisionError",
    "InvalidCapabilityError",
    "CapabilityDefect",
]
