"""Unit tests for the conversation log."""

import pytest
import pytest_check as check

from src.models.schemas import Message, Role
from src.streaming.accumulator import ConversationLog
from src.streaming.errors import LogStateError


@pytest.fixture
def published() -> list[tuple[Message, ...]]:
    return []


@pytest.fixture
def log(published: list[tuple[Message, ...]]) -> ConversationLog:
    return ConversationLog(on_change=published.append)


class TestAccumulation:
    """Deltas grow the trailing assistant message."""

    def test_deltas_then_finish(self, log: ConversationLog) -> None:
        """Applying deltas and finishing yields the joined text."""
        log.begin_assistant_message()
        for delta in ["Hel", "lo, ", "world"]:
            log.apply_delta(delta)
        log.finish()

        final = log.messages[-1]
        check.equal(final.text, "Hello, world")
        check.is_false(final.in_progress)
        check.is_none(log.streaming_index)
        check.equal(log.accumulated_text, "")

    def test_begin_appends_placeholder(self, log: ConversationLog) -> None:
        """A new assistant message starts empty and in progress."""
        log.append_user("Hi")
        log.begin_assistant_message()

        check.equal(
            log.messages,
            (
                Message(role=Role.USER, text="Hi"),
                Message(role=Role.ASSISTANT, text="", in_progress=True),
            ),
        )
        check.equal(log.streaming_index, 1)

    def test_accumulated_text_resets_per_message(self, log: ConversationLog) -> None:
        """Each assistant message accumulates from scratch."""
        log.begin_assistant_message()
        log.apply_delta("first")
        log.finish()
        log.begin_assistant_message()
        log.apply_delta("second")

        check.equal(log.messages[0].text, "first")
        check.equal(log.messages[1].text, "second")

    def test_fail_discards_partial_text(self, log: ConversationLog) -> None:
        """Failure replaces the accumulated text entirely."""
        log.begin_assistant_message()
        log.apply_delta("Partial")
        log.fail("Sorry, something went wrong.")

        final = log.messages[-1]
        check.equal(final.text, "Sorry, something went wrong.")
        check.is_false(final.in_progress)
        check.is_not_in("Partial", final.text)


class TestSnapshots:
    """Every change is published as a new tuple."""

    def test_each_change_publishes(
        self, log: ConversationLog, published: list[tuple[Message, ...]]
    ) -> None:
        """append, begin, two deltas and finish publish five snapshots."""
        log.append_user("Q")
        log.begin_assistant_message()
        log.apply_delta("A")
        log.apply_delta("B")
        log.finish()

        texts = [snapshot[-1].text for snapshot in published]
        check.equal(texts, ["Q", "", "A", "AB", "AB"])

    def test_published_snapshots_never_change(
        self, log: ConversationLog, published: list[tuple[Message, ...]]
    ) -> None:
        """Earlier snapshots keep their content after later deltas."""
        log.begin_assistant_message()
        log.apply_delta("one")
        first = published[-1]
        log.apply_delta(" two")

        check.equal(first[-1].text, "one")
        check.is_true(first[-1].in_progress)
        check.equal(published[-1][-1].text, "one two")

    def test_single_in_progress_invariant(
        self, log: ConversationLog, published: list[tuple[Message, ...]]
    ) -> None:
        """No snapshot ever has more than one in-progress message."""
        for question in ["a", "b"]:
            log.append_user(question)
            log.begin_assistant_message()
            log.apply_delta("x")
            log.finish()

        for snapshot in published:
            flagged = [m for m in snapshot if m.in_progress]
            assert len(flagged) <= 1
            if flagged:
                assert snapshot[-1] is flagged[0]
                assert flagged[0].role is Role.ASSISTANT

    def test_greeting_opens_log(self) -> None:
        """A greeting is a finished assistant message."""
        log = ConversationLog(greeting="Hello!")

        assert log.messages == (Message(role=Role.ASSISTANT, text="Hello!"),)


class TestMisuse:
    """Out-of-order calls are caller bugs."""

    @pytest.mark.parametrize("call", ["apply_delta", "fail"])
    def test_requires_in_progress_message(self, log: ConversationLog, call: str) -> None:
        with pytest.raises(LogStateError):
            getattr(log, call)("text")

    def test_finish_requires_in_progress_message(self, log: ConversationLog) -> None:
        with pytest.raises(LogStateError):
            log.finish()

    def test_cannot_begin_twice(self, log: ConversationLog) -> None:
        log.begin_assistant_message()

        with pytest.raises(LogStateError):
            log.begin_assistant_message()

    def test_cannot_append_user_while_streaming(self, log: ConversationLog) -> None:
        log.begin_assistant_message()

        with pytest.raises(LogStateError):
            log.append_user("interrupt")

    def test_finished_messages_stay_finished(self, log: ConversationLog) -> None:
        """A delta after finish is rejected, not applied."""
        log.begin_assistant_message()
        log.finish()

        with pytest.raises(LogStateError):
            log.apply_delta("late")
        assert log.messages[-1].text == ""
