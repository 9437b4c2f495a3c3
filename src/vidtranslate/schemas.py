from pydantic import BaseModel

from .models import JobResult


class TranslationData(BaseModel):
    originalFileName: str
    storedFileName: str
    targetLanguage: str
    status: str = "completed"
    filePath: str
    translatedFilePath: str
    # Only present when the video was actually dubbed
    transcription: str | None = None
    translatedText: str | None = None

    @classmethod
    def from_result(cls, result: JobResult, public_prefix: str) -> "TranslationData":
        prefix = public_prefix.rstrip("/")
        return cls(
            originalFileName=result.original_filename,
            storedFileName=result.stored_filename,
            targetLanguage=result.target_language,
            status=result.status,
            filePath=f"{prefix}/{result.stored_filename}",
            translatedFilePath=f"{prefix}/{result.output_video.name}",
            transcription=result.transcription,
            translatedText=result.translated_text,
        )


class TranslationResponse(BaseModel):
    success: bool = True
    message: str = "Video processing completed"
    data: TranslationData


class ErrorResponse(BaseModel):
    error: str
    errorType: str | None = None
