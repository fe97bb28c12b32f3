"""
Tests for the state store and run context.
"""

import pytest

from flowpilot.agent.context import RunContext
from flowpilot.agent.decision import ScriptedDecisionProvider
from flowpilot.agent.exceptions import CapabilityDefect, DecisionError
from flowpilot.agent.models import CapabilityInfo, DecisionContext
from flowpilot.agent.state import AgentState


class TestAgentState:
    """Tests for AgentState."""

    def test_starts_empty(self):
        """Test a fresh store."""
        state = AgentState()
        assert state.get_history() == []
        assert state.get_context() == {}
        assert len(state) == 0

    def test_append_preserves_order(self):
        """Test that messages keep insertion order."""
        state = AgentState()
        state.append_message("first")
        state.append_message("second")
        state.append_message("first")
        assert state.get_history() == ["first", "second", "first"]
        assert len(state) == 3

    def test_history_is_a_snapshot(self):
        """Test that the returned history does not track later appends."""
        state = AgentState()
        state.append_message("one")
        history = state.get_history()
        state.append_message("two")
        history.append("tampered")

        assert history == ["one", "tampered"]
        assert state.get_history() == ["one", "two"]

    def test_merge_context_later_key_wins(self):
        """Test shallow merge semantics."""
        state = AgentState()
        state.merge_context({"user_id": "user123", "plan": "Basic"})
        state.merge_context({"plan": "Premium", "months": 1})
        assert state.get_context() == {"user_id": "user123", "plan": "Premium", "months": 1}

    def test_merge_is_shallow(self):
        """Test that nested mappings are replaced, not merged."""
        state = AgentState()
        state.merge_context({"profile": {"name": "Ada", "tier": "gold"}})
        state.merge_context({"profile": {"tier": "silver"}})
        assert state.get_context() == {"profile": {"tier": "silver"}}

    def test_context_is_a_snapshot(self):
        """Test that mutating the returned context does not affect the store."""
        state = AgentState()
        state.merge_context({"a": 1})
        context = state.get_context()
        context["b"] = 2
        assert state.get_context() == {"a": 1}

    def test_snapshot(self):
        """Test the decision snapshot."""
        state = AgentState()
        state.append_message("hello")
        state.merge_context({"k": "v"})
        snapshot = state.snapshot()
        assert isinstance(snapshot, DecisionContext)
        assert snapshot.history == ["hello"]
        assert snapshot.context == {"k": "v"}

    def test_separate_instances_do_not_share_state(self):
        """Test that each store is independent."""
        first, second = AgentState(), AgentState()
        first.append_message("only in first")
        assert second.get_history() == []


class FailingProvider:
    def select_capability(self, candidates, context):
        raise ConnectionError("provider offline")

    def evaluate_condition(self, condition, context):
        raise TimeoutError("provider timed out")


class BrokenProvider:
    def select_capability(self, candidates, context):
        raise CapabilityDefect("provider contract broken")

    def evaluate_condition(self, condition, context):
        raise CapabilityDefect("provider contract broken")


class SloppyProvider:
    def select_capability(self, candidates, context):
        return 0

    def evaluate_condition(self, condition, context):
        return "yes"


class TestRunContext:
    """Tests for RunContext."""

    def test_creates_state_when_omitted(self):
        """Test that a fresh store is created per context."""
        decider = ScriptedDecisionProvider()
        first, second = RunContext(decider), RunContext(decider)
        assert isinstance(first.state, AgentState)
        assert first.state is not second.state

    def test_uses_supplied_state(self):
        """Test that an externally supplied store is used as is."""
        state = AgentState()
        context = RunContext(ScriptedDecisionProvider(), state=state)
        assert context.state is state

    def test_provider_receives_snapshot(self):
        """Test that the provider sees the current history."""
        decider = ScriptedDecisionProvider(conditions=[True])
        seen = []
        original = decider.evaluate_condition

        def spy(condition, snapshot):
            seen.append(snapshot)
            return original(condition, snapshot)

        decider.evaluate_condition = spy
        context = RunContext(decider)
        context.state.append_message("Agent loop 1/10")

        assert context.evaluate_condition("The user is happy") is True
        assert seen[0].history == ["Agent loop 1/10"]

    def test_selection_failure_wrapped(self):
        """Test that untyped provider failures become DecisionError."""
        context = RunContext(FailingProvider())
        info = CapabilityInfo(tag="Action", name="Respond", description="")

        with pytest.raises(DecisionError) as exc_info:
            context.select_capability([info])
        assert isinstance(exc_info.value.original_error, ConnectionError)

    def test_condition_failure_wrapped(self):
        """Test that condition failures become DecisionError."""
        context = RunContext(FailingProvider())
        with pytest.raises(DecisionError):
            context.evaluate_condition("anything")

    def test_agent_error_passes_through(self):
        """Test that typed provider errors are not re-wrapped."""
        context = RunContext(ScriptedDecisionProvider())
        with pytest.raises(DecisionError) as exc_info:
            context.evaluate_condition("anything")
        assert exc_info.value.original_error is None

    def test_non_bool_verdict_is_defect(self):
        """Test that a provider answering with a non-bool is a defect."""
        context = RunContext(SloppyProvider())
        with pytest.raises(CapabilityDefect):
            context.evaluate_condition("anything")

    def test_selection_defect_not_wrapped(self):
        """Test that a provider defect escapes selection unchanged."""
        context = RunContext(BrokenProvider())
        with pytest.raises(CapabilityDefect, match="provider contract broken"):
            context.select_capability([])

    def test_condition_defect_not_wrapped(self):
        """Test that a provider defect escapes condition evaluation unchanged."""
        context = RunContext(BrokenProvider())
        with pytest.raises(CapabilityDefect, match="provider contract broken"):
            context.evaluate_condition("anything")
