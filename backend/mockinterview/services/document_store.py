from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from mockinterview.exceptions import AuthorizationError
from mockinterview.models.models import DocumentKind, DocumentMeta, DocumentSummary


class DocumentStore:
    """Uploaded documents, one Mongo document each with its chunks embedded."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def insert(self, document: DocumentMeta) -> DocumentMeta:
        await self.collection.insert_one(document.model_dump())
        return document

    async def find_owned(self, document_id: str, user_id: str) -> Optional[DocumentMeta]:
        raw = await self.collection.find_one({"id": document_id, "user_id": user_id})
        return DocumentMeta.model_validate(raw) if raw else None

    async def get_owned(self, document_id: str, user_id: str) -> DocumentMeta:
        document = await self.find_owned(document_id, user_id)
        if document is None:
            raise AuthorizationError("document", document_id)
        return document

    async def latest(self, user_id: str, kind: DocumentKind) -> Optional[DocumentMeta]:
        raw = await self.collection.find_one(
            {"user_id": user_id, "kind": kind.value},
            sort=[("created_at", DESCENDING)],
        )
        return DocumentMeta.model_validate(raw) if raw else None

    async def list_for_user(self, user_id: str) -> List[DocumentSummary]:
        cursor = self.collection.find({"user_id": user_id}, {"chunks": 0, "_id": 0})
        rows = await cursor.sort("created_at", DESCENDING).to_list(length=None)
        return [DocumentSummary.model_validate(row) for row in rows]

    async def delete_owned(self, document_id: str, user_id: str) -> None:
        result = await self.collection.delete_one({"id": document_id, "user_id": user_id})
        if result.deleted_count == 0:
            raise AuthorizationError("document", document_id)
