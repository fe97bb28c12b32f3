#!/usr/bin/env python3
"""
Example: HTTP-backed Action

Calls the ICanHazDadJoke search API through a RequestsAction, both directly
and as the opening step of a workflow.
"""

from flowpilot import (
    ActionExecutionError,
    ActionReturn,
    ParseError,
    RandomDecisionProvider,
    RunContext,
    and_then,
    configure_logging,
    create_action,
    create_workflow,
    first,
)
from flowpilot.actions import create_joke_search_action


def main():
    configure_logging(verbose=True)
    get_joke = create_joke_search_action()

    print("\n=== Example 1: Direct call ===\n")
    try:
        print(get_joke.handle({"term": "scientist"}).result)
    except ActionExecutionError as e:
        print(f"Joke search failed: {e}")

    print("\n=== Example 2: Missing parameter ===\n")
    try:
        get_joke.handle({})
    except ParseError as e:
        print(f"Rejected before any request was made: {e.message.splitlines()[0]}")

    print("\n=== Example 3: Workflow ===\n")
    get_cat_joke = create_action(
        name="GetCatJoke",
        description="Fetches a joke about cats",
        execute=lambda _: get_joke.handle({"term": "cat"}),
        errors=(ActionExecutionError,),
    )
    sign_off = create_action(
        name="SignOff",
        description="Ends the workflow",
        execute=lambda _: ActionReturn(done=True, result="That's all folks!"),
    )
    workflow = create_workflow(
        name="Joke of the day",
        description="Tell a cat joke and sign off",
        flow=first(get_cat_joke).pipe(and_then(sign_off)),
    )
    print(workflow.execute(RunContext(decider=RandomDecisionProvider())))


if __name__ == "__main__":
    main()
