"""
Per-run execution context.

RunContext bundles the collaborators one run needs (the decision provider
and the state store) and is passed explicitly to every component that
executes. Provider failures are normalised here into DecisionError.
"""

from typing import Optional, Sequence

from loguru import logger

from .decision import DecisionProvider
from .exceptions import AgentError, CapabilityDefect, DecisionError
from .models import CapabilityInfo
from .state import AgentState


class RunContext:
    """
    Collaborators shared by every step of a single run.

    Example:
        ```python
        context = RunContext(decider=RandomDecisionProvider(seed=7))
        support_agent.execute(context, max_loops=5)
        print(context.state.get_history())
        ```
    """

    def __init__(self, decider: DecisionProvider, state: Optional[AgentState] = None):
        """
        Parameters:
            decider (DecisionProvider): Provider that picks capabilities and evaluates conditions.
            state (Optional[AgentState]): Store for this run; a fresh one is created when omitted.
        """
        self.decider = decider
        self.state = state if state is not None else AgentState()

    def select_capability(self, candidates: Sequence[CapabilityInfo]) -> int:
        """
        Ask the provider to pick one of ``candidates``.

        The returned index is not range-checked here; the agent treats an
        out-of-range index as a defect.

        Raises:
            DecisionError: If the provider fails with anything other than an AgentError
                or a CapabilityDefect, both of which propagate unchanged.
        """
        try:
            return self.decider.select_capability(list(candidates), self.state.snapshot())
        except AgentError:
            raise
        except CapabilityDefect:
            raise
        except Exception as e:
            logger.error(f"Decision provider failed to select a capability: {e}")
            raise DecisionError("Capability selection failed", e) from e

    def evaluate_condition(self, condition: str) -> bool:
        """
        Ask the provider whether ``condition`` currently holds.

        Raises:
            DecisionError: If the provider fails with anything other than an AgentError
                or a CapabilityDefect, both of which propagate unchanged.
            CapabilityDefect: If the provider answers with something other than a bool.
        """
        try:
            verdict = self.decider.evaluate_condition(condition, self.state.snapshot())
        except AgentError:
            raise
        except CapabilityDefect:
            raise
        except Exception as e:
            logger.error(f"Decision provider failed to evaluate '{condition}': {e}")
            raise DecisionError(f"Condition evaluation failed for '{condition}'", e) from e

        if not isinstance(verdict, bool):
            raise CapabilityDefect(
                f"Decision provider returned {type(verdict).__name__} for condition "
                f"'{condition}', expected bool"
            )
        logger.debug(f"Condition '{condition}' evaluated to {verdict}")
        return verdict

    def __repr__(self) -> str:
        return f"RunContext(decider={type(self.decider).__name__}, state={self.state!r})"
