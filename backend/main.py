# backend/main.py

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import DEBUG, CORS_ORIGINS
from exceptions import DocsumError
from routes.documents import router as documents_router
from routes.summaries import router as summaries_router
from summarizer import log_backend_selection, resolve_backend
from logger import logger

app = FastAPI(debug=DEBUG)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)
app.include_router(documents_router, prefix="/documents", tags=["documents"])
app.include_router(summaries_router, tags=["summaries"])


@app.exception_handler(DocsumError)
async def handle_docsum_error(request: Request, exc: DocsumError):
    if exc.status_code >= 500:
        logger.error("%s on %s (%s): %s", type(exc).__name__, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = str(first.get("loc", ["request"])[-1])
        if first.get("type") == "missing":
            message = f"{field} is required"
        else:
            message = f"{field}: {first.get('msg', 'invalid value')}"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error("%s on %s (500): %s", type(exc).__name__, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})


@app.on_event("startup")
async def report_llm_backend():
    log_backend_selection()


@app.get("/")
def root():
    backend = resolve_backend()
    return {"message": "docsum running", "llm_backend": backend.value if backend else None}
