"""
Workflow: a named Flow run once from an empty state.
"""

from loguru import logger

from .context import RunContext
from .exceptions import InvalidCapabilityError
from .flow import FlowBuilder
from .models import ActionReturn, CapabilityInfo


class Workflow:
    """
    Named wrapper around a FlowBuilder.

    Every execution resolves the builder again and starts from a fresh empty
    state; the final state token is discarded.
    """

    def __init__(self, name: str, description: str, flow: FlowBuilder):
        if not name:
            raise InvalidCapabilityError(repr(name), "Workflow name must not be empty")
        if not isinstance(flow, FlowBuilder):
            raise InvalidCapabilityError(name, "flow must be a FlowBuilder")

        self._name = name
        self._description = description
        self._flow = flow

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def flow(self) -> FlowBuilder:
        return self._flow

    def execute(self, context: RunContext) -> ActionReturn:
        """
        Resolve and run the flow.

        Parameters:
            context (RunContext): Collaborators for this run.

        Returns:
            ActionReturn: The flow's done/result pair.

        Raises:
            AgentError: Any typed error raised while building or running the flow.
        """
        logger.info(f"Running workflow: {self._name}")
        flow = self._flow.build(context)
        result = flow.execute({})
        logger.debug(f"Workflow {self._name} finished (done={result.done})")
        return result.to_action_return()

    def describe(self) -> CapabilityInfo:
        return CapabilityInfo(tag="Workflow", name=self._name, description=self._description)

    def __repr__(self) -> str:
        return f"Workflow(name={self._name})"


def create_workflow(name: str, description: str, flow: FlowBuilder) -> Workflow:
    """Build a Workflow. Nothing runs until ``execute`` is called."""
    return Workflow(name=name, description=description, flow=flow)
