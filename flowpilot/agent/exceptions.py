"""
Custom exceptions for the Flowpilot orchestration core.

Typed errors derive from AgentError and travel through Flow, Workflow and
Agent boundaries unmodified. CapabilityDefect is kept outside that hierarchy
so that ordinary ``except AgentError`` handling never swallows a broken
contract.
"""

from typing import Optional


class AgentError(Exception):
    """Base exception for all typed, recoverable orchestration errors."""

    pass


class ParseError(AgentError):
    """Raised when arguments passed to an Action fail parameter validation."""

    def __init__(self, message: str, action_name: Optional[str] = None):
        """
        Initialize the exception with the validation message.

        Parameters:
            message (str): Human-readable description of the validation failure.
            action_name (Optional[str]): Name of the action whose parameters were rejected.
        """
        self.message = message
        self.action_name = action_name
        if action_name:
            super().__init__(f"Invalid parameters for action '{action_name}': {message}")
        else:
            super().__init__(message)


class ActionExecutionError(AgentError):
    """Raised by an Action body to report a declared business failure."""

    def __init__(self, action_name: str, message: str):
        """
        Initialize the exception with the failing action's name and a message.

        Parameters:
            action_name (str): Name of the action that failed.
            message (str): Description of the failure.
        """
        self.action_name = action_name
        self.message = message
        super().__init__(f"Action '{action_name}' execution failed: {message}")


class FlowExecutionError(AgentError):
    """Raised when a flow step fails for a reason owned by the flow itself."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AgentExecutionError(AgentError):
    """Raised when an agent cannot carry on with its loop."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DecisionError(AgentError):
    """Raised when a decision provider fails or is unavailable."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """
        Initialize the exception with a message and the underlying error, if any.

        Parameters:
            message (str): Description of the failed decision.
            original_error (Optional[Exception]): The exception raised by the provider or its backend.
        """
        self.message = message
        self.original_error = original_error
        if original_error is not None:
            super().__init__(f"{message}: {str(original_error)}")
        else:
            super().__init__(message)


class InvalidCapabilityError(AgentError):
    """Raised when an Action, Workflow or Agent is constructed with invalid configuration."""

    def __init__(self, name: str, reason: str):
        """
        Initialize the exception for a capability with invalid configuration.

        Parameters:
            name (str): Name of the offending capability or container.
            reason (str): Human-readable explanation of the problem.
        """
        self.name = name
        self.reason = reason
        super().__init__(f"Capability '{name}' is invalid: {reason}")


class CapabilityDefect(Exception):
    """
    Internal contract violation that must terminate the run.

    Not an AgentError: only a top-level supervisor is expected to catch it.
    """

    pass
