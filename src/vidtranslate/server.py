"""
FastAPI application exposing the dub pipeline over HTTP.
"""

import asyncio
import logging

import httpx
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from . import __version__
from .config import Settings, load_settings
from .errors import PipelineError, UploadTooLargeError, ValidationError
from .models import JobInput
from .pipeline import DubPipeline
from .schemas import ErrorResponse, TranslationData, TranslationResponse
from .storage import ensure_dir

logger = logging.getLogger("vidtranslate")

GENERIC_ERROR = "Error processing video"
FIELD_ERRORS = {
    "video": "No video file provided",
    "targetLanguage": "No target language specified",
}
# Room for multipart boundaries and part headers on top of the video bytes.
MULTIPART_OVERHEAD = 64 * 1024


def _error(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, errorType=error_type)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def create_app(
    settings: Settings | None = None, transport: httpx.BaseTransport | None = None
) -> FastAPI:
    """Build the app; ``transport`` replaces the HTTP layer of every pipeline run."""
    settings = settings or load_settings()
    ensure_dir(settings.upload_dir)

    app = FastAPI(title="Video Translator", version=__version__)
    app.state.settings = settings
    app.state.transport = transport
    app.state.job_slots = asyncio.Semaphore(settings.max_concurrent_jobs)

    app.mount(
        settings.public_prefix,
        StaticFiles(directory=str(settings.upload_dir), check_dir=False),
        name="uploads",
    )

    @app.middleware("http")
    async def _reject_oversize_body(request: Request, call_next):
        length = request.headers.get("content-length", "")
        if (
            request.method == "POST"
            and length.isdigit()
            and int(length) > settings.max_upload_bytes + MULTIPART_OVERHEAD
        ):
            exc = UploadTooLargeError(settings.max_upload_bytes)
            logger.warning("Rejected request: %s (Content-Length %s)", exc.message, length)
            return _error(exc.status_code, exc.message)
        return await call_next(request)

    @app.exception_handler(ValidationError)
    async def _validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("Rejected request: %s", exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _form_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [str(part) for err in exc.errors() for part in err.get("loc", ())]
        field = next((f for f in FIELD_ERRORS if f in fields), None)
        message = FIELD_ERRORS[field] if field else "Invalid request"
        logger.warning("Rejected request: %s", message)
        return _error(400, message)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/translate")
    async def translate_video(
        video: UploadFile | None = File(None),
        targetLanguage: str | None = Form(None),
    ) -> JSONResponse:
        if video is None or not video.filename:
            raise ValidationError(FIELD_ERRORS["video"], field="video")
        if not targetLanguage or not targetLanguage.strip():
            raise ValidationError(FIELD_ERRORS["targetLanguage"], field="targetLanguage")

        job = JobInput(
            payload=video.file,
            original_filename=video.filename,
            target_language=targetLanguage.strip(),
        )
        pipeline = DubPipeline(settings, transport=app.state.transport)
        try:
            async with app.state.job_slots:
                result = await run_in_threadpool(pipeline.run, job)
        except ValidationError:
            raise
        except PipelineError as e:
            logger.error(
                "Error processing video (%s at %s): %s", e.error_type, e.stage, e.message, exc_info=True
            )
            return _error(500, GENERIC_ERROR, e.error_type)
        except Exception:
            logger.exception("Error processing video")
            return _error(500, GENERIC_ERROR, "internal")
        finally:
            await video.close()

        response = TranslationResponse(data=TranslationData.from_result(result, settings.public_prefix))
        return JSONResponse(content=response.model_dump(exclude_none=True))

    return app
