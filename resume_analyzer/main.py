import logging
from contextlib import AsyncExitStack, asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.datastructures import UploadFile

from .config import Settings, configure_logging
from .extraction import TextExtractor
from .schemas import SECTIONS, AnalysisResult, ErrorResponse
from .service import ResumeAnalysisService, UploadedResume
from .storage import build_blob_store, build_record_store

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
ACCEPTED_EXTENSIONS = (".pdf", ".doc", ".docx", ".txt", ".rtf", ".jpg", ".jpeg", ".png")
RESUME_FIELD = "resume"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    async with AsyncExitStack() as stack:
        blob_store = build_blob_store(settings)
        stack.push_async_callback(blob_store.close)
        record_store = build_record_store(settings)
        stack.push_async_callback(record_store.close)
        await record_store.setup()

        app.state.service = ResumeAnalysisService(TextExtractor(), blob_store, record_store)
        yield


app = FastAPI(title="Resume Analyzer", lifespan=lifespan)
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_service(request: Request) -> ResumeAnalysisService:
    return request.app.state.service


async def _read_resume(request: Request) -> UploadedResume:
    async with request.form() as form:
        resume = form.get(RESUME_FIELD)
        if not isinstance(resume, UploadFile):
            raise ValueError(f"Multipart body has no '{RESUME_FIELD}' file field")
        data = await resume.read()

    return UploadedResume(
        filename=resume.filename or RESUME_FIELD,
        content_type=resume.content_type or "",
        data=data,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"accept": ",".join(ACCEPTED_EXTENSIONS), "sections": SECTIONS},
    )


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.post(
    "/api/analyze-resume",
    response_model=AnalysisResult,
    responses={500: {"model": ErrorResponse}},
)
async def analyze_resume(
    request: Request,
    service: ResumeAnalysisService = Depends(get_service),
):
    try:
        resume = await _read_resume(request)
        return await service.analyze(resume)
    except Exception as exc:
        logger.exception("Error processing resume")
        body = ErrorResponse(error="Failed to process resume", details=str(exc))
        return JSONResponse(status_code=500, content=body.model_dump())
