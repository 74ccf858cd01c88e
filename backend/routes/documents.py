# backend/routes/documents.py

import asyncio
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

import config
from exceptions import DocsumError
from logger import logger
from models import FileListResponse, SaveSummaryRequest, SaveSummaryResponse, UploadResponse
from services import (
    delete_document,
    download_document,
    list_documents,
    read_document_text,
    save_summary_file,
    upload_document,
)
from stores import MetadataStore, ObjectStore, get_metadata_store, get_object_store

router = APIRouter()


def _required_path(path: Optional[str]) -> str:
    if not path or not path.strip():
        raise HTTPException(status_code=400, detail="path is required")
    return path.strip()


@router.get("", response_model=FileListResponse, response_model_exclude_unset=True)
def list_files(
    search: Optional[str] = None,
    sort_by: Literal["date", "name"] = "date",
    limit: int = Query(config.LIST_LIMIT, ge=1, le=config.LIST_LIMIT),
    offset: int = Query(0, ge=0),
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
):
    """All visible objects, newest first, with summary annotations when available."""
    files, total = list_documents(
        object_store,
        metadata_store,
        search=search,
        sort_by=sort_by,
        limit=limit,
        offset=offset,
    )
    return FileListResponse(files=files, total=total)


@router.post("", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    data = await file.read()
    logger.info("Upload request received (file=%s, bytes=%s)", file.filename, len(data))
    return await asyncio.to_thread(
        upload_document,
        object_store,
        metadata_store,
        filename=file.filename,
        data=data,
        content_type=file.content_type,
    )


@router.get("/content")
def get_content(
    path: Optional[str] = None,
    object_store: ObjectStore = Depends(get_object_store),
):
    """Extracted text for the review panel."""
    path = _required_path(path)
    try:
        content = read_document_text(object_store, path)
    except DocsumError:
        raise
    except Exception as exc:
        logger.exception("Failed to load content for '%s'", path)
        raise HTTPException(status_code=400, detail=str(exc) or "Failed to load content") from exc
    return {"content": content}


@router.get("/download-summary")
def download_summary(
    path: Optional[str] = None,
    object_store: ObjectStore = Depends(get_object_store),
):
    """Serve a stored object as an attachment so the browser downloads it."""
    path = _required_path(path)
    data, filename = download_document(object_store, path)
    return Response(
        content=data,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/save-summary", response_model=SaveSummaryResponse)
def save_summary(
    request: SaveSummaryRequest,
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
):
    return save_summary_file(
        object_store,
        metadata_store,
        request.filePath,
        custom_name=request.fileName,
        summary=request.summary,
    )


@router.delete("")
def delete_without_path():
    raise HTTPException(status_code=400, detail="Path is required")


@router.delete("/{path:path}")
def delete_file(
    path: str,
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
):
    path = path.strip()
    if not path:
        raise HTTPException(status_code=400, detail="Path is required")
    delete_document(object_store, metadata_store, path)
    return {"success": True}
