# backend/routes/summaries.py

from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException

from models import SummarizeRequest, SummarizeResponse, SummaryHistoryResponse
from services import get_summary_history
from stores import MetadataStore, ObjectStore, get_metadata_store, get_object_store
from summarizer import ChatBackend, get_chat_backend_factory, summarize_document

router = APIRouter()


@router.post("/summarize", response_model=SummarizeResponse, response_model_exclude_none=True)
def summarize(
    request: SummarizeRequest,
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
    backend_factory: Callable[[], ChatBackend] = Depends(get_chat_backend_factory),
):
    """Summary in the requested language; English may be served from cache."""
    return summarize_document(
        request.filePath,
        request.language,
        object_store,
        metadata_store,
        backend_factory,
    )


@router.get("/summary-history", response_model=SummaryHistoryResponse)
def summary_history(
    path: Optional[str] = None,
    metadata_store: MetadataStore = Depends(get_metadata_store),
):
    if not path:
        raise HTTPException(status_code=400, detail="path is required")
    return {"history": get_summary_history(metadata_store, path)}
