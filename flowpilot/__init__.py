"""
Flowpilot - actions, flows, workflows and recursive agents driven by a
pluggable decision provider.
"""

from .agent import (
    Action,
    ActionExecutionError,
    ActionReturn,
    Agent,
    AgentError,
    AgentExecutionError,
    AgentState,
    CapabilityDefect,
    CapabilityInfo,
    DecisionContext,
    DecisionError,
    DecisionProvider,
    Flow,
    FlowBuilder,
    FlowExecutionError,
    FlowResult,
    InvalidCapabilityError,
    LLMClient,
    LLMDecisionProvider,
    LoopConfig,
    Message,
    NoParams,
    ParseError,
    RandomDecisionProvider,
    RetryConfig,
    RunContext,
    ScriptedDecisionProvider,
    Workflow,
    and_then,
    create_action,
    create_agent,
    create_workflow,
    do_if,
    first,
    no_op,
    pipe,
)
from .logging_config import configure_logging

configure_logging(verbose=False)

__all__ = [
    "Action",
    "NoParams",
    "create_action",
    "Agent",
    "create_agent",
    "Workflow",
    "create_workflow",
    "Flow",
    "FlowBuilder",
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
    "LLMClient",
    "RetryConfig",
    "LoopConfig",
    "ActionReturn",
    "FlowResult",
    "CapabilityInfo",
    "DecisionContext",
    "Message",
    "AgentError",
    "ParseError",
    "ActionExecutionError",
    "FlowExecutionError",
    "AgentExecutionError",
    "DecisionError",
    "InvalidCapabilityError",
    "CapabilityDefect",
    "configure_logging",
]
