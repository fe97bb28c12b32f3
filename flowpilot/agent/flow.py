"""
Flow DSL for deterministic multi-step procedures.

A FlowBuilder is a recipe that resolves to a concrete Flow once it is given
a RunContext. Steps are functions from builder to builder, so procedures
read top to bottom with ``pipe``:

    ```python
    cancel_flow = pipe(
        first(ask_reason),
        and_then(get_details),
        do_if(
            "The user still wants to cancel",
            on_true=lambda flow: pipe(flow, and_then(cancel), and_then(send_email)),
            on_false=no_op,
        ),
    )
    ```

Sequencing law: once any step reports ``done=True`` every later step is
skipped and that result is returned unchanged.
"""

from typing import Any, Callable

from loguru import logger

from .actions import Action
from .context import RunContext
from .exceptions import FlowExecutionError
from .models import FlowResult


class Flow:
    """
    Concrete, immutable procedure produced by a FlowBuilder.

    The state token passed to ``execute`` is opaque: flows only thread it
    forward and never inspect it.
    """

    def __init__(self, run: Callable[[Any], FlowResult]):
        self._run = run

    def execute(self, state: Any = None) -> FlowResult:
        """
        Run every step of the flow.

        Parameters:
            state (Any): Opaque state token handed to the first step.

        Returns:
            FlowResult: Result of the last step that ran.
        """
        return self._run(state)


class FlowBuilder:
    """
    Recipe for a Flow.

    Building is where branch decisions are taken, so a builder is resolved
    again (and its conditions re-evaluated) every time it is built.
    """

    def __init__(self, build: Callable[[RunContext], Flow]):
        self._build = build

    def build(self, context: RunContext) -> Flow:
        """Resolve this recipe to a concrete Flow for one run."""
        return self._build(context)

    def pipe(self, *steps: "FlowStep") -> "FlowBuilder":
        """Apply ``steps`` left to right; see :func:`pipe`."""
        return pipe(self, *steps)

    @classmethod
    def of(cls, flow: Flow) -> "FlowBuilder":
        """Wrap an already resolved Flow."""
        return cls(lambda _context: flow)


FlowStep = Callable[[FlowBuilder], FlowBuilder]


def pipe(builder: FlowBuilder, *steps: FlowStep) -> FlowBuilder:
    """
    Thread ``builder`` through ``steps``.

    Raises:
        FlowExecutionError: If a step does not produce a FlowBuilder.
    """
    for step in steps:
        builder = step(builder)
        if not isinstance(builder, FlowBuilder):
            raise FlowExecutionError(
                f"Flow step {step!r} returned {type(builder).__name__}, expected FlowBuilder"
            )
    return builder


def first(action: Action) -> FlowBuilder:
    """
    Start a flow with ``action``.

    The resulting flow runs ``action.handle({})`` once and passes the
    incoming state through untouched.
    """

    def _build(context: RunContext) -> Flow:
        def _execute(state: Any) -> FlowResult:
            logger.debug(f"Flow step: {action.name}")
            result = action.handle({})
            return FlowResult(done=result.done, result=result.result, next_state=state)

        return Flow(_execute)

    return FlowBuilder(_build)


def and_then(action: Action) -> FlowStep:
    """
    Append ``action`` to a flow.

    If the previous steps report ``done=True`` their result is returned and
    ``action`` never runs. Otherwise ``action`` runs and its done/result pair
    is returned with the previous step's state.
    """

    def step(previous: FlowBuilder) -> FlowBuilder:
        def _build(context: RunContext) -> Flow:
            previous_flow = previous.build(context)

            def _execute(state: Any) -> FlowResult:
                previous_result = previous_flow.execute(state)
                if previous_result.done:
                    logger.debug(f"Flow already done, skipping {action.name}")
                    return previous_result

                logger.debug(f"Flow step: {action.name}")
                result = action.handle({})
                return FlowResult(
                    done=result.done,
                    result=result.result,
                    next_state=previous_result.next_state,
                )

            return Flow(_execute)

        return FlowBuilder(_build)

    return step


def do_if(condition: str, on_true: FlowStep, on_false: FlowStep) -> FlowStep:
    """
    Branch on a natural-language ``condition``.

    When built, the previous steps are resolved to a concrete Flow, the run's
    decision provider evaluates ``condition`` and the matching branch
    continues the composition. The condition is evaluated on every build.

    Parameters:
        condition (str): Condition handed to the decision provider.
        on_true (FlowStep): Continuation used when the condition holds.
        on_false (FlowStep): Continuation used otherwise.
    """

    def step(previous: FlowBuilder) -> FlowBuilder:
        def _build(context: RunContext) -> Flow:
            resolved = FlowBuilder.of(previous.build(context))
            branch = on_true if context.evaluate_condition(condition) else on_false
            return pipe(resolved, branch).build(context)

        return FlowBuilder(_build)

    return step


def no_op(builder: FlowBuilder) -> FlowBuilder:
    """Branch arm that leaves the flow unchanged."""
    return builder
