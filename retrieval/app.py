import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, File, HTTPException, UploadFile

from logging_config import setup_logging
from vector_store.models import StoreStats

from .config import RetrievalConfig
from .models import (
    ChatContext,
    ChatContextRequest,
    ClearResponse,
    FileDeleteResponse,
    HealthResponse,
    RetrievalContext,
    RetrieveRequest,
    UploadResponse,
)
from .service import RetrievalService

load_dotenv()


def create_app(
    config: RetrievalConfig | None = None,
    service: RetrievalService | None = None,
) -> FastAPI:
    setup_logging(level=getattr(logging, os.environ.get("RAG_LOG_LEVEL", "INFO").upper(), logging.INFO))
    service = service or RetrievalService(config or RetrievalConfig.from_env())

    app = FastAPI(
        title="Document Chat Retrieval Service",
        version="1.0.0",
        description="Document upload, vector store management and RAG context retrieval.",
    )

    @app.get("/health")
    def health() -> dict:
        store_health = service.health()
        response = HealthResponse(
            status="ok" if store_health.healthy else "degraded",
            store=store_health,
        )
        return response.model_dump(by_alias=True)

    @app.post("/api/documents", response_model=UploadResponse)
    def upload_documents(files: Optional[list[UploadFile]] = File(None)) -> UploadResponse:
        if not files:
            raise HTTPException(status_code=400, detail="No files provided")
        payload = [(upload.filename or "upload", upload.file.read()) for upload in files]
        results = service.ingest_files(payload)
        return UploadResponse(
            success=all(result.success for result in results),
            documents=results,
        )

    @app.get("/api/vector-store", response_model=StoreStats)
    def vector_store_stats() -> StoreStats:
        try:
            return service.stats()
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    @app.delete("/api/vector-store")
    def delete_documents(filename: Optional[str] = None) -> dict:
        try:
            if filename:
                result = service.delete_by_filename(filename)
                response = FileDeleteResponse(success=True, deleted_count=result.deleted_count)
            else:
                service.clear()
                response = ClearResponse(success=True, message="Vector store cleared")
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return response.model_dump(by_alias=True)

    @app.post("/api/retrieve", response_model=RetrievalContext)
    def retrieve(request: RetrieveRequest) -> RetrievalContext:
        return service.retrieve(request.query, request.top_k)

    @app.post("/api/chat/context", response_model=ChatContext)
    def chat_context(request: ChatContextRequest) -> ChatContext:
        return service.prepare_chat(request.messages, request.use_rag, request.top_k)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(
        "retrieval.app:app",
        host=os.environ.get("RAG_HOST", "127.0.0.1"),
        port=int(os.environ.get("RAG_PORT", "8000")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
