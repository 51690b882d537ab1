from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from typing import Optional

from mockinterview.dependencies import get_chat_service, get_current_user, get_document_service
from mockinterview.models.models import ChatQueryRequest, ChatStartRequest
from mockinterview.services.chat_service import ChatService
from mockinterview.services.document_service import DocumentService

router = APIRouter()

documents_router = APIRouter(prefix="/api/documents", tags=["documents"])
chat_router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.get("/")
async def root():
    return "Hello World! The API is running."


@documents_router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    type: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    data = await file.read() if file is not None else None
    document = await service.upload(
        user_id,
        file_name=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        data=data,
        kind=type,
    )
    return {
        "message": "Document uploaded and processed successfully",
        "document": document.summary(),
    }


@documents_router.get("/list")
async def list_documents(
    user_id: str = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    return await service.list_documents(user_id)


@documents_router.delete("/{document_id}")
async def delete_document(
    document_id: str,
    user_id: str = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    await service.delete_document(user_id, document_id)
    return {"message": "Document deleted successfully"}


@chat_router.post("/start", status_code=status.HTTP_201_CREATED)
async def start_chat(
    body: Optional[ChatStartRequest] = Body(None),
    user_id: str = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    body = body or ChatStartRequest()
    session = await service.start(user_id, resume_id=body.resume_id, jd_id=body.jd_id)
    return session.public()


@chat_router.post("/query")
async def query_chat(
    body: ChatQueryRequest,
    user_id: str = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return await service.query(user_id, body.chat_id, body.message, body.question)


@chat_router.get("/list")
async def list_chats(
    user_id: str = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return await service.list_sessions(user_id)


@chat_router.get("/{chat_id}")
async def get_chat(
    chat_id: str,
    user_id: str = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    session = await service.get(user_id, chat_id)
    return session.public()


router.include_router(documents_router)
router.include_router(chat_router)
