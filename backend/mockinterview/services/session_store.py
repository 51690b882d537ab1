"""
Chat session persistence.

Turns are appended with a version-guarded update: of two requests racing on
one session only the first write lands. Query operations also hold the
per-session lock while they run.
"""

import asyncio
from datetime import datetime, timezone
from typing import List
from weakref import WeakValueDictionary

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from mockinterview.exceptions import AuthorizationError, ConcurrentUpdateError
from mockinterview.models.models import ChatSession, ChatSummary, Turn


class SessionStore:

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection
        self._locks: "WeakValueDictionary[str, asyncio.Lock]" = WeakValueDictionary()

    def lock(self, chat_id: str) -> asyncio.Lock:
        lock = self._locks.get(chat_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[chat_id] = lock
        return lock

    async def create(self, session: ChatSession) -> ChatSession:
        await self.collection.insert_one(session.model_dump(mode="python"))
        return session

    async def get_owned(self, chat_id: str, user_id: str) -> ChatSession:
        raw = await self.collection.find_one({"id": chat_id, "user_id": user_id})
        if raw is None:
            raise AuthorizationError("chat", chat_id)
        return ChatSession.model_validate(raw)

    async def list_for_user(self, user_id: str) -> List[ChatSummary]:
        cursor = self.collection.find({"user_id": user_id}, {"turns": 0, "_id": 0})
        rows = await cursor.sort("created_at", DESCENDING).to_list(length=None)
        return [ChatSummary.model_validate(row) for row in rows]

    async def append_turns(self, session: ChatSession, turns: List[Turn]) -> ChatSession:
        """Append all turns in one update, only if nobody wrote since `session` was read."""
        now = datetime.now(timezone.utc)
        result = await self.collection.update_one(
            {"id": session.id, "user_id": session.user_id, "version": session.version},
            {
                "$push": {"turns": {"$each": [turn.model_dump(mode="python") for turn in turns]}},
                "$inc": {"version": 1},
                "$set": {"updated_at": now},
            },
        )
        if result.matched_count == 0:
            raise ConcurrentUpdateError(session.id)
        session.turns.extend(turns)
        session.version += 1
        session.updated_at = now
        return session
