#!/usr/bin/env python3
"""
Example: Customer Support Agents

A support agent that delegates to logs, payments and subscription agents,
plus a subscription-cancellation workflow with retention branches.

Decisions are random unless OPENAI_API_KEY is set, in which case a
language model picks capabilities and evaluates the workflow conditions.
"""

import json
import os
import time

from pydantic import BaseModel, Field

from flowpilot import (
    ActionReturn,
    LLMDecisionProvider,
    RandomDecisionProvider,
    RunContext,
    and_then,
    configure_logging,
    create_action,
    create_agent,
    create_workflow,
    do_if,
    first,
    no_op,
    pipe,
)
from flowpilot.client import OpenAIClient

CURRENT_USER = "user123"


class LogsService:
    """Stand-in for a log search backend."""

    def search_logs(self, query: str) -> str:
        time.sleep(0.1)
        return f'Found logs for query: "{query}" - Error occurred at timestamp 2024-01-15T10:30:00Z'


class PaymentsService:
    """Stand-in for a billing backend."""

    def get_payment_info(self, user_id: str) -> str:
        time.sleep(0.15)
        return f"Payment info for user {user_id}: Last payment $99.99 on 2024-01-01"


class SubscriptionService:
    """Stand-in for a subscription backend."""

    def get_subscription_details(self, user_id: str) -> dict:
        time.sleep(0.1)
        return {
            "userId": user_id,
            "plan": "Premium",
            "startDate": "2023-12-01",
            "monthsSubscribed": 1,
        }

    def cancel_subscription(self, user_id: str) -> str:
        time.sleep(0.2)
        return f"Subscription cancelled for user {user_id}"

    def add_free_month(self, user_id: str) -> str:
        time.sleep(0.15)
        return f"Added free month for user {user_id}"


class SearchLogsParams(BaseModel):
    query: str = Field("recent errors", description="Log query to search for")


class GetPaymentsParams(BaseModel):
    user_id: str = Field(CURRENT_USER, description="User whose payments to look up")


class RespondParams(BaseModel):
    response: str = Field(
        "Thanks for reaching out, I've looked into your account.",
        description="Message to send to the user",
    )


def build_agents(logs: LogsService, payments: PaymentsService, subscriptions: SubscriptionService):
    """Wire services into actions, the cancellation workflow and the agents."""
    search_logs = create_action(
        name="SearchLogs",
        description="Searches the user's logs for a given log query",
        params=SearchLogsParams,
        execute=lambda p: ActionReturn(done=False, result=logs.search_logs(p.query)),
    )
    get_payments = create_action(
        name="GetPayments",
        description="Retrieves payment information for a user",
        params=GetPaymentsParams,
        execute=lambda p: ActionReturn(done=False, result=payments.get_payment_info(p.user_id)),
    )
    respond = create_action(
        name="Respond",
        description="Responds to the user once the necessary information has been gathered",
        params=RespondParams,
        execute=lambda p: ActionReturn(done=True, result=p.response),
    )
    ask_cancellation_reason = create_action(
        name="AskCancellationReason",
        description="Asks the user why they want to cancel their subscription",
        execute=lambda _: ActionReturn(
            done=False, result="User says: 'The service is too expensive for what I get'"
        ),
    )
    get_subscription_details = create_action(
        name="GetSubscriptionDetails",
        description="Retrieves subscription details for the current user",
        execute=lambda _: ActionReturn(
            done=False,
            result="Subscription details: "
            + json.dumps(subscriptions.get_subscription_details(CURRENT_USER)),
        ),
    )
    offer_one_month_free = create_action(
        name="OfferOneMonthFree",
        description="Offers the user one month free to retain them",
        execute=lambda _: ActionReturn(
            done=False,
            result="We understand your concern. How about we offer you one month free? "
            "Would that help?",
        ),
    )
    add_one_month_free = create_action(
        name="AddOneMonthFree",
        description="Adds one month free to the user's subscription",
        execute=lambda _: ActionReturn(
            done=False, result=subscriptions.add_free_month(CURRENT_USER)
        ),
    )
    cancel_subscription = create_action(
        name="CancelSubscription",
        description="Cancels the user's subscription",
        execute=lambda _: ActionReturn(
            done=False, result=subscriptions.cancel_subscription(CURRENT_USER)
        ),
    )
    email_user_about_cancellation = create_action(
        name="EmailUserAboutCancellation",
        description="Sends confirmation email about cancellation",
        execute=lambda _: ActionReturn(
            done=True,
            result="Cancellation confirmation email sent. We're sorry to see you go!",
        ),
    )

    cancel_subscription_flow = pipe(
        first(ask_cancellation_reason),
        and_then(get_subscription_details),
        do_if(
            "The user has only been subscribed for one month",
            on_true=lambda flow: pipe(
                flow,
                and_then(offer_one_month_free),
                do_if(
                    "The user says yes to a free month",
                    on_true=and_then(add_one_month_free),
                    on_false=no_op,
                ),
            ),
            on_false=no_op,
        ),
        do_if(
            "The user still wants to cancel",
            on_true=lambda flow: pipe(
                flow, and_then(cancel_subscription), and_then(email_user_about_cancellation)
            ),
            on_false=no_op,
        ),
    )

    cancel_subscription_workflow = create_workflow(
        name="Cancel a subscription",
        description="Cancels the user's subscription with retention logic",
        flow=cancel_subscription_flow,
    )

    logs_agent = create_agent(
        name="Logs Agent",
        description="An agent that can search through customer logs to debug issues",
        actions=[search_logs, respond],
    )
    payment_agent = create_agent(
        name="Payment Agent",
        description="An agent specialized in payment operations and billing inquiries",
        actions=[get_payments, respond],
    )
    subscription_agent = create_agent(
        name="Subscription Agent",
        description="An agent that handles subscription management and cancellations",
        actions=[get_subscription_details, respond],
        workflows=[cancel_subscription_workflow],
    )
    support_agent = create_agent(
        name="Support Agent",
        description="A comprehensive customer support agent that can help with logs, "
        "payments, and subscriptions",
        actions=[respond],
        agents=[logs_agent, payment_agent, subscription_agent],
    )

    return logs_agent, cancel_subscription_workflow, support_agent


def build_decider():
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        print("Note: Set OPENAI_API_KEY to let a language model make the decisions")
        return RandomDecisionProvider(seed=42)
    return LLMDecisionProvider(
        llm_client=OpenAIClient(api_key=api_key),
        system_prompt="You are the decision step of a customer support agent.",
    )


def main():
    configure_logging(verbose=True)

    logs_agent, cancel_workflow, support_agent = build_agents(
        LogsService(), PaymentsService(), SubscriptionService()
    )
    context = RunContext(decider=build_decider())

    print("\n=== Example 1: Logs Agent ===\n")
    print("Logs Agent Result:", logs_agent.execute(context, max_loops=3))

    print("\n=== Example 2: Cancel Subscription Workflow ===\n")
    print("Workflow Result:", cancel_workflow.execute(context))

    print("\n=== Example 3: Main Support Agent ===\n")
    print("Support Agent Result:", support_agent.execute(context, max_loops=5))

    print("\n=== Example 4: Agent State History ===\n")
    for index, message in enumerate(context.state.get_history(), 1):
        print(f"  {index}. {message}")


if __name__ == "__main__":
    main()
