"""Crawl Insights API – FastAPI app for crawl-export uploads."""

import logging

from fastapi import FastAPI, File, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ai_service import resolve_completion_fn
from config import LOG_LEVEL
from csv_parser import decode_upload, parse_crawl_csv
from database import get_analysis, init_db
from errors import InputError, StorageError
from pipeline import run_pipeline
from schemas import AnalysisPayload, ChatRequest, ChatResponse, UploadResponse

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("crawl_insights")

CHAT_PLACEHOLDER = (
    "Chat functionality will be implemented to answer strategic questions about your content analysis."
)

app = FastAPI(
    title="Crawl Insights API",
    description="SEO analysis of website crawl exports",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.on_event("startup")
def startup() -> None:
    init_db()
    app.state.completion_fn = resolve_completion_fn()


@app.get("/", response_class=PlainTextResponse)
def index() -> str:
    return "SEO Analysis API - Ready"


@app.options("/{path:path}")
def preflight(path: str) -> Response:
    return Response(status_code=200)


@app.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
def upload(request: Request, file: UploadFile | None = File(None)):
    """
    Pipeline: parse CSV -> normalize -> aggregate -> AI analysis -> insights -> store.
    """
    if file is None:
        return JSONResponse(status_code=400, content={"error": "No file provided"})

    try:
        csv_text = decode_upload(file.file.read())
        rows = parse_crawl_csv(csv_text)
        completion_fn = getattr(request.app.state, "completion_fn", None)
        result = run_pipeline(rows, completion_fn=completion_fn)
    except InputError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception:
        logger.exception("Upload error")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to process upload",
                "details": "An unexpected error occurred while analyzing the crawl.",
            },
        )

    return UploadResponse(
        success=True,
        sessionId=result["sessionId"],
        totalPages=len(rows),
        analysis=AnalysisPayload.model_validate(result),
    )


@app.get("/analyze", response_model=AnalysisPayload, response_model_exclude_none=True)
def analyze(session_id: str = Query("", alias="sessionId")):
    """Return a previously computed analysis by session id."""
    session_id = session_id.strip()
    if not session_id:
        return JSONResponse(status_code=400, content={"error": "Session ID required"})

    try:
        stored = get_analysis(session_id)
    except StorageError:
        logger.exception("Analysis lookup failed for session %s", session_id)
        stored = None

    if stored is None:
        return JSONResponse(status_code=404, content={"error": "Analysis not found", "sessionId": session_id})
    return AnalysisPayload.model_validate(stored)


@app.post("/chat", response_model=ChatResponse)
def chat(body: ChatRequest):
    """Strategic Q&A over a stored analysis. Not implemented yet."""
    if not body.question or not body.sessionId:
        return JSONResponse(status_code=400, content={"error": "Question and session ID required"})
    return ChatResponse(answer=CHAT_PLACEHOLDER, question=body.question, sessionId=body.sessionId)


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}
