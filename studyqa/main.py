import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studyqa.core.config import Settings, settings as default_settings
from studyqa.core.errors import StudyQAError
from studyqa.routes import auth, documents, questions
from studyqa.services.auth_service import AuthService
from studyqa.services.openai_service import OpenAIService
from studyqa.services.pipeline import DocumentPipeline, QuestionGenerator, TextExtractor
from studyqa.storage import Storage, create_storage
from studyqa.utils.file_processor import FileProcessor

logger = logging.getLogger("studyqa")


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    extractor: Optional[TextExtractor] = None,
    generator: Optional[QuestionGenerator] = None,
) -> FastAPI:
    """Build the API with its pipeline. Collaborators default to the configured ones."""
    settings = settings or default_settings

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    storage = storage or create_storage(settings)
    pipeline = DocumentPipeline(
        storage=storage,
        extractor=extractor or FileProcessor(ocr_language=settings.OCR_LANGUAGE),
        generator=generator or OpenAIService(settings),
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        max_question_count=settings.MAX_QUESTION_COUNT,
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Upload documents, extract their text and generate study questions"
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.pipeline = pipeline
    app.state.auth_service = AuthService(storage)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info("%s %s %s in %.0fms", request.method, request.url.path, response.status_code, duration_ms)
        return response

    @app.exception_handler(StudyQAError)
    async def handle_app_error(request: Request, exc: StudyQAError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        body = {"detail": exc.message}
        if getattr(exc, "errors", None):
            body["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
        )

    # Register routers
    app.include_router(auth.router)
    app.include_router(documents.router)
    app.include_router(questions.router)

    @app.on_event("startup")
    async def startup_event():
        logger.info("%s v%s starting (storage: %s)", settings.APP_NAME, settings.APP_VERSION, type(storage).__name__)

    @app.on_event("shutdown")
    async def shutdown_event():
        storage.close()

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
