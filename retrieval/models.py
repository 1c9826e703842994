from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from vector_store.models import SearchResult, StoreHealth


class UploadResult(BaseModel):
    filename: str
    chunks: int = 0
    success: bool = True
    error: Optional[str] = None


class UploadResponse(BaseModel):
    success: bool
    documents: list[UploadResult] = Field(default_factory=list)


class RetrieveRequest(BaseModel):
    query: str = Field(..., min_length=1)
    top_k: int = Field(5, ge=1, le=50)


class Source(BaseModel):
    url: str
    title: str


class RetrievalContext(BaseModel):
    query: str
    results: list[SearchResult] = Field(default_factory=list)
    context_text: str = ""
    sources: list[Source] = Field(default_factory=list)


class ChatMessage(BaseModel):
    role: str
    content: Union[str, list[dict[str, Any]]] = ""

    def text(self) -> str:
        """Plain text of the message; text parts are joined with spaces."""
        if isinstance(self.content, str):
            return self.content
        return " ".join(
            part.get("text", "")
            for part in self.content
            if part.get("type") == "text"
        )


class ChatContextRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(default_factory=list)
    use_rag: bool = Field(True, alias="useRAG")
    top_k: int = Field(5, ge=1, le=50)


class ChatContext(BaseModel):
    query: str = ""
    system_prompt: str
    context_text: str = ""
    sources: list[Source] = Field(default_factory=list)


class FileDeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    deleted_count: int = Field(0, alias="deletedCount")


class ClearResponse(BaseModel):
    success: bool
    message: str


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    store: StoreHealth
