"""Session phase machine."""

from __future__ import annotations

from bugdefense.core.state import EndReason, Phase, SessionStateMachine


class TestSessionStateMachine:
    def test_happy_path(self) -> None:
        """IDLE -> READY -> RUNNING -> ENDED -> READY."""
        machine = SessionStateMachine()
        assert machine.transition(Phase.READY, player="alice")
        assert machine.transition(Phase.RUNNING)
        assert machine.transition(Phase.ENDED, end_reason=EndReason.TIME_UP)
        assert machine.context.end_reason is EndReason.TIME_UP
        assert machine.transition(Phase.READY)
        assert machine.context.player == "alice"

    def test_end_reason_cleared_when_leaving_ended(self) -> None:
        """A reset drops the previous end reason."""
        machine = SessionStateMachine(Phase.RUNNING)
        machine.transition(Phase.ENDED, end_reason=EndReason.MELTDOWN)
        machine.transition(Phase.READY)
        assert machine.context.end_reason is None

    def test_ended_cannot_jump_to_running(self) -> None:
        """A finished session must be reset before running again."""
        machine = SessionStateMachine(Phase.ENDED)
        assert not machine.can_transition(Phase.RUNNING)
        assert not machine.transition(Phase.RUNNING)
        assert machine.phase is Phase.ENDED

    def test_idle_cannot_start(self) -> None:
        """No session without a player."""
        machine = SessionStateMachine()
        assert not machine.transition(Phase.RUNNING)
        assert machine.phase is Phase.IDLE

    def test_listeners_see_transitions(self) -> None:
        """Listeners get old phase, new phase and context."""
        machine = SessionStateMachine()
        seen = []
        machine.add_listener(lambda old, new, ctx: seen.append((old, new, ctx.player)))

        machine.transition(Phase.READY, player="bob")

        assert seen == [(Phase.IDLE, Phase.READY, "bob")]

    def test_failing_listener_does_not_block(self) -> None:
        """A listener error is logged and the transition still happens."""
        machine = SessionStateMachine()
        seen = []

        def broken(old, new, ctx):
            raise RuntimeError("boom")

        machine.add_listener(broken)
        machine.add_listener(lambda old, new, ctx: seen.append(new))

        assert machine.transition(Phase.READY)
        assert seen == [Phase.READY]

    def test_removed_listener_is_silent(self) -> None:
        """remove_listener stops notifications."""
        machine = SessionStateMachine()
        seen = []
        listener = lambda old, new, ctx: seen.append(new)  # noqa: E731
        machine.add_listener(listener)
        machine.remove_listener(listener)
        machine.transition(Phase.READY)
        assert seen == []

    def test_only_abort_skips_scoring(self) -> None:
        """Every end reason except abort submits a score."""
        assert [r for r in EndReason if not r.submits_score] == [EndReason.ABORTED]
