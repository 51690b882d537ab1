from pathlib import PurePath
from typing import Callable, List, Optional

from starlette.concurrency import run_in_threadpool

from mockinterview.config.settings import logger, CHUNK_SIZE, MAX_UPLOAD_BYTES
from mockinterview.decorators.timing import async_timing
from mockinterview.exceptions import ExtractionError, ValidationError
from mockinterview.models.models import DocumentKind, DocumentMeta, DocumentSummary
from mockinterview.services.chunker import chunk_text
from mockinterview.services.document_store import DocumentStore
from mockinterview.services.embedder import Embedder
from mockinterview.services.storage import CloudinaryStorage
from mockinterview.services.text_extractor import extract_pdf_text

PDF_CONTENT_TYPE = "application/pdf"


def validate_upload(
    file_name: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
    kind: Optional[str],
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> DocumentKind:
    if not file_name or data is None:
        raise ValidationError("No file uploaded", field="file")
    if not kind:
        raise ValidationError("Document type is required", field="type")
    try:
        document_kind = DocumentKind.parse(kind)
    except ValueError:
        raise ValidationError(
            "Document type must be 'resume' or 'job_description'", field="type"
        ) from None
    if content_type != PDF_CONTENT_TYPE:
        raise ValidationError("Only pdfs allowed", field="file")
    if not data:
        raise ValidationError("Uploaded file is empty", field="file")
    if len(data) > max_bytes:
        raise ValidationError(
            "Uploaded file is too large", field="file", details={"max_bytes": max_bytes}
        )
    return document_kind


class DocumentService:

    def __init__(
        self,
        store: DocumentStore,
        storage: CloudinaryStorage,
        embedder: Embedder,
        extract_text: Callable[[bytes], str] = extract_pdf_text,
        chunk_size: int = CHUNK_SIZE,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self.store = store
        self.storage = storage
        self.embedder = embedder
        self.extract_text = extract_text
        self.chunk_size = chunk_size
        self.max_upload_bytes = max_upload_bytes

    @async_timing
    async def upload(
        self,
        user_id: str,
        file_name: Optional[str],
        content_type: Optional[str],
        data: Optional[bytes],
        kind: Optional[str],
    ) -> DocumentMeta:
        document_kind = validate_upload(file_name, content_type, data, kind, self.max_upload_bytes)
        text = await run_in_threadpool(self.extract_text, data)
        texts = chunk_text(text, self.chunk_size)
        if not texts:
            raise ExtractionError("Could not extract text from PDF")
        file_url = await self.storage.upload(data, public_id=PurePath(file_name).stem)
        chunks, embedding_failed = await self.embedder.embed_chunks(texts)
        if embedding_failed:
            logger.warning(f"Document {file_name} stored with degraded embeddings")
        document = DocumentMeta(
            user_id=user_id,
            kind=document_kind,
            file_name=file_name,
            file_url=file_url,
            chunks=chunks,
            embedding_failed=embedding_failed,
        )
        await self.store.insert(document)
        logger.info(f"Stored {document.kind} {document.id} with {len(chunks)} chunks for user {user_id}")
        return document

    async def list_documents(self, user_id: str) -> List[DocumentSummary]:
        return await self.store.list_for_user(user_id)

    async def delete_document(self, user_id: str, document_id: str) -> None:
        await self.store.delete_owned(document_id, user_id)
        logger.info(f"Deleted document {document_id} for user {user_id}")
