"""
Main Agent implementation for the Flowpilot orchestration core.

An Agent repeatedly asks the run's decision provider to pick one of its
actions, workflows or sub-agents, runs it, and stops on the first result
with ``done=True`` or when its loop budget is spent.
"""

from typing import Iterable, List, Literal, Optional, Sequence, Tuple, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict

from .actions import Action
from .context import RunContext
from .exceptions import AgentExecutionError, CapabilityDefect, InvalidCapabilityError
from .models import ActionReturn, CapabilityInfo, LoopConfig
from .workflow import Workflow

NO_CAPABILITIES_RESULT = "No capabilities available"


class Agent:
    """
    Recursive orchestrator over actions, workflows and sub-agents.

    Sub-agents may reference other agents; cycles are not detected and the
    loop budget is the only bound on mutual recursion.

    Example:
        ```python
        agent = create_agent(
            name="Logs Agent",
            description="Searches customer logs to debug issues",
            actions=[search_logs, respond],
        )
        result = agent.execute(RunContext(decider=my_provider), max_loops=3)
        ```
    """

    def __init__(
        self,
        name: str,
        description: str,
        actions: Iterable[Action] = (),
        workflows: Iterable[Workflow] = (),
        agents: Iterable["Agent"] = (),
        loop_config: Optional[LoopConfig] = None,
    ):
        """
        Initialize an Agent with its capabilities.

        Parameters:
            name (str): Agent name.
            description (str): Description shown to a parent agent's decision provider.
            actions (Iterable[Action]): Actions, in the order offered to the provider.
            workflows (Iterable[Workflow]): Workflows, offered after the actions.
            agents (Iterable[Agent]): Sub-agents, offered last.
            loop_config (Optional[LoopConfig]): Loop budgets; defaults to LoopConfig().

        Raises:
            InvalidCapabilityError: If ``name`` is empty, a capability has the wrong type,
                or two capabilities of the same kind share a name.
        """
        if not name:
            raise InvalidCapabilityError(repr(name), "Agent name must not be empty")

        self._name = name
        self._description = description
        self._actions: Tuple[Action, ...] = self._check_members(actions, Action, "action")
        self._workflows: Tuple[Workflow, ...] = self._check_members(
            workflows, Workflow, "workflow"
        )
        self._agents: Tuple[Agent, ...] = self._check_members(agents, Agent, "agent")
        self.loop_config = loop_config or LoopConfig()

        logger.debug(
            f"Agent '{name}' initialized with {len(self._actions)} action(s), "
            f"{len(self._workflows)} workflow(s), {len(self._agents)} sub-agent(s)"
        )

    def _check_members(self, members: Iterable, kind: type, label: str) -> tuple:
        members = tuple(members)
        seen = set()
        for member in members:
            if not isinstance(member, kind):
                raise InvalidCapabilityError(
                    self._name, f"expected {label}, got {type(member).__name__}"
                )
            if member.name in seen:
                raise InvalidCapabilityError(
                    self._name, f"duplicate {label} name '{member.name}'"
                )
            seen.add(member.name)
        return members

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def actions(self) -> Tuple[Action, ...]:
        return self._actions

    @property
    def workflows(self) -> Tuple[Workflow, ...]:
        return self._workflows

    @property
    def agents(self) -> Tuple["Agent", ...]:
        return self._agents

    def capabilities(self) -> List["Capability"]:
        """
        List capabilities in the fixed order actions, workflows, agents.

        Returns:
            List[Capability]: Tagged capabilities preserving declared order.
        """
        return [
            *(ActionCapability(value=action) for action in self._actions),
            *(WorkflowCapability(value=workflow) for workflow in self._workflows),
            *(AgentCapability(value=agent) for agent in self._agents),
        ]

    def execute(self, context: RunContext, max_loops: Optional[int] = None) -> ActionReturn:
        """
        Run the selection loop until a capability reports done or the budget runs out.

        Parameters:
            context (RunContext): Decision provider and state store for this run.
            max_loops (Optional[int]): Iteration budget; the configured default (10) when None.

        Returns:
            ActionReturn: The first result with ``done=True``, "No capabilities available"
            when the agent has nothing to run, or a budget-exhausted result.

        Raises:
            AgentExecutionError: If ``max_loops`` is negative.
            AgentError: Any typed error raised by the provider or a dispatched capability.
            CapabilityDefect: If the provider returns an index outside the candidate range.
        """
        if max_loops is None:
            max_loops = self.loop_config.default_max_loops
        if max_loops < 0:
            raise AgentExecutionError(
                f"Agent '{self._name}' cannot run with a negative loop budget ({max_loops})"
            )

        state = context.state
        logger.info(f"Agent '{self._name}' starting with budget of {max_loops} loop(s)")
        state.append_message(f"Starting agent: {self._name}")

        for loop_count in range(max_loops):
            logger.info(f"Agent '{self._name}' loop {loop_count + 1}/{max_loops}")
            state.append_message(f"Agent loop {loop_count + 1}/{max_loops}")

            capabilities = self.capabilities()
            if not capabilities:
                logger.warning(f"Agent '{self._name}' has no capabilities")
                return ActionReturn(done=True, result=NO_CAPABILITIES_RESULT)

            capability = self._select(context, capabilities)
            result = self._dispatch(context, capability)

            if result.done:
                state.append_message(f"Completed with result: {result.result}")
                logger.success(f"Agent '{self._name}' completed")
                return result

        state.append_message(f"Agent reached max loops ({max_loops})")
        logger.warning(f"Agent '{self._name}' reached maximum loops ({max_loops})")
        return ActionReturn(done=True, result=f"Agent reached maximum loops ({max_loops})")

    def _select(self, context: RunContext, capabilities: Sequence["Capability"]) -> "Capability":
        """
        Ask the provider for an index and return the matching capability.

        Raises:
            CapabilityDefect: If the index is not an int in ``[0, len(capabilities))``.
        """
        index = context.select_capability([c.describe() for c in capabilities])
        if isinstance(index, bool) or not isinstance(index, int):
            raise CapabilityDefect(
                f"Impossible: selection {index!r} is not an index "
                f"for array of length {len(capabilities)}"
            )
        if not 0 <= index < len(capabilities):
            raise CapabilityDefect(
                f"Impossible: index {index} out of bounds "
                f"for array of length {len(capabilities)}"
            )
        return capabilities[index]

    def _dispatch(self, context: RunContext, capability: "Capability") -> ActionReturn:
        state = context.state

        if capability.tag == "Action":
            action = capability.value
            state.append_message(f"Executing action: {action.name}")
            # selected actions are invoked without arguments
            return action.handle({})

        elif capability.tag == "Workflow":
            workflow = capability.value
            state.append_message(f"Executing workflow: {workflow.name}")
            return workflow.execute(context)

        elif capability.tag == "Agent":
            agent = capability.value
            state.append_message(f"Delegating to sub-agent: {agent.name}")
            return agent.execute(context, max_loops=self.loop_config.sub_agent_max_loops)

        raise CapabilityDefect(f"Unknown capability tag: {capability.tag!r}")

    def describe(self) -> CapabilityInfo:
        return CapabilityInfo(tag="Agent", name=self._name, description=self._description)

    def __repr__(self) -> str:
        return (
            f"Agent(name={self._name}, actions={len(self._actions)}, "
            f"workflows={len(self._workflows)}, agents={len(self._agents)})"
        )


class ActionCapability(BaseModel):
    """An Action offered to the decision provider."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    tag: Literal["Action"] = "Action"
    value: Action

    def describe(self) -> CapabilityInfo:
        return self.value.describe()


class WorkflowCapability(BaseModel):
    """A Workflow offered to the decision provider."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    tag: Literal["Workflow"] = "Workflow"
    value: Workflow

    def describe(self) -> CapabilityInfo:
        return self.value.describe()


class AgentCapability(BaseModel):
    """A sub-agent offered to the decision provider."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    tag: Literal["Agent"] = "Agent"
    value: Agent

    def describe(self) -> CapabilityInfo:
        return self.value.describe()


Capability = Union[ActionCapability, WorkflowCapability, AgentCapability]


def create_agent(
    name: str,
    description: str,
    actions: Iterable[Action] = (),
    workflows: Iterable[Workflow] = (),
    agents: Iterable[Agent] = (),
    loop_config: Optional[LoopConfig] = None,
) -> Agent:
    """Build an Agent. Nothing runs until ``execute`` is called."""
    return Agent(
        name=name,
        description=description,
        actions=actions,
        workflows=workflows,
        agents=agents,
        loop_config=loop_config,
    )
