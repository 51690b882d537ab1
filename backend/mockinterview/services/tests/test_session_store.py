import pytest

from mockinterview.exceptions import ConcurrentUpdateError
from mockinterview.models.models import ChatSession, Role, Turn


def new_session():
    return ChatSession(
        user_id="user-1",
        resume_id="r1",
        jd_id="j1",
        questions=["Q1?"],
        turns=[Turn(role=Role.SYSTEM, content="Chat session started.")],
    )


@pytest.mark.asyncio
async def test_append_writes_both_turns_and_bumps_version(session_store, chats_collection):
    session = await session_store.create(new_session())
    turns = [Turn(role=Role.USER, content="answer"), Turn(role=Role.ASSISTANT, content="ok", score=6)]

    await session_store.append_turns(session, turns)

    row = chats_collection.rows[0]
    assert [turn["role"] for turn in row["turns"]] == ["system", "user", "assistant"]
    assert row["version"] == 1
    assert session.version == 1
    assert (await session_store.get_owned(session.id, "user-1")).turns == session.turns


@pytest.mark.asyncio
async def test_stale_append_is_rejected_without_partial_write(session_store, chats_collection):
    await session_store.create(new_session())
    first = await session_store.get_owned(chats_collection.rows[0]["id"], "user-1")
    second = await session_store.get_owned(first.id, "user-1")

    await session_store.append_turns(first, [Turn(role=Role.USER, content="a"), Turn(role=Role.ASSISTANT, content="b", score=5)])
    with pytest.raises(ConcurrentUpdateError):
        await session_store.append_turns(second, [Turn(role=Role.USER, content="c"), Turn(role=Role.ASSISTANT, content="d", score=5)])

    assert [turn["content"] for turn in chats_collection.rows[0]["turns"]] == ["Chat session started.", "a", "b"]


def test_lock_is_shared_per_session(session_store):
    lock = session_store.lock("chat-1")
    assert session_store.lock("chat-1") is lock
    assert session_store.lock("chat-2") is not lock
