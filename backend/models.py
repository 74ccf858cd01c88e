# backend/models.py

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Language = Literal["en", "zh", "yue"]


class SummarizeRequest(BaseModel):
    filePath: str = Field(min_length=1)
    language: Optional[Language] = None


class SaveSummaryRequest(BaseModel):
    filePath: str = Field(min_length=1)
    fileName: Optional[str] = None
    summary: Optional[str] = None


class SummaryHistoryEntry(BaseModel):
    summary: str
    language: str
    created_at: str


class StoredObject(BaseModel):
    """One entry of a bucket listing."""
    name: str
    created_at: Optional[str] = None
    size: Optional[int] = None


class DocumentRecord(BaseModel):
    """Row of the documents table, keyed by object path."""
    path: str
    name: Optional[str] = None
    size: Optional[int] = None
    summary: Optional[str] = None
    summary_history: List[SummaryHistoryEntry] = Field(default_factory=list)
    summary_file_path: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FileEntry(BaseModel):
    name: str
    display_name: str
    path: str
    created_at: Optional[str] = None
    size: Optional[int] = None
    has_summary: Optional[bool] = None
    summary_file_path: Optional[str] = None
    is_ai_summary: Optional[bool] = None


class FileListResponse(BaseModel):
    files: List[FileEntry]
    total: int


class UploadResponse(BaseModel):
    path: str
    url: str
    name: str
    size: int


class SummarizeResponse(BaseModel):
    summary: str
    cached: Optional[bool] = None


class SaveSummaryResponse(BaseModel):
    summaryFilePath: str
    summaryFileName: str
    alreadySaved: bool = False


class SummaryHistoryResponse(BaseModel):
    history: List[SummaryHistoryEntry]
