"""Tests for the conversation state store."""

from dataclasses import replace

from tutor_showcase.domain.intake import IntakeStep
from tutor_showcase.services.conversations import ConversationStore


def test_start_opens_session_at_title_step() -> None:
    store = ConversationStore()

    session = store.start(7, "1700000000000-poem.pdf")

    assert session.step is IntakeStep.AWAITING_TITLE
    assert session.title is None
    assert store.get(7) == session


def test_start_replaces_existing_session() -> None:
    store = ConversationStore()
    first = store.start(7, "1-a.pdf")
    store.advance(first, title="Old", step=IntakeStep.AWAITING_AUTHOR)

    second = store.start(7, "2-b.pdf")

    current = store.get(7)
    assert current == second
    assert current.title is None
    assert current.document_key == "2-b.pdf"


def test_clear_is_idempotent() -> None:
    store = ConversationStore()
    store.start(7, "1-a.pdf")

    assert store.clear(7) is True
    assert store.clear(7) is False
    assert store.get(7) is None


def test_save_ignores_stale_publish_cycle() -> None:
    store = ConversationStore()
    stale = store.start(7, "1-a.pdf")
    store.clear(7)

    assert store.save(replace(stale, title="Late")) is False
    assert store.get(7) is None

    current = store.start(7, "2-b.pdf")
    assert store.save(replace(stale, title="Late")) is False
    assert store.get(7) == current


def test_sessions_lists_open_sessions() -> None:
    store = ConversationStore()
    store.start(1, "1-a.pdf")
    store.start(2, "2-b.pdf")

    assert {session.user_id for session in store.sessions()} == {1, 2}


def test_finish_removes_current_session() -> None:
    store = ConversationStore()
    session = store.start(7, "1-a.pdf")

    assert store.finish(session) is True
    assert store.get(7) is None
    assert store.finish(session) is False


def test_finish_leaves_newer_session_alone() -> None:
    store = ConversationStore()
    stale = store.start(7, "1-a.pdf")
    newer = store.start(7, "2-b.pdf")

    assert store.finish(stale) is False
    assert store.is_current(stale) is False
    assert store.is_current(newer) is True
    assert store.get(7) == newer
