"""
Exception taxonomy for the video translation service.

Validation problems are the caller's fault and map to 4xx responses; every
PipelineError maps to a 500 and records the stage that was running.
"""


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when there's a configuration issue"""

    def __init__(self, message: str, missing_keys: list[str] | None = None):
        details = {"missing_keys": missing_keys} if missing_keys else {}
        super().__init__(message, details)


class ValidationError(ApplicationError):
    """Raised when a submitted field is missing or invalid"""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, details)


class UploadTooLargeError(ValidationError):
    """Raised when an upload exceeds the configured size cap"""

    status_code = 413

    def __init__(self, limit_bytes: int):
        super().__init__("Video file too large", field="video")
        self.details["limit_bytes"] = limit_bytes


class PipelineError(ApplicationError):
    """Raised when a pipeline stage fails; always fatal for the request"""

    error_type = "internal"

    def __init__(self, message: str, stage: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.stage = stage


class StorageError(PipelineError):
    """Raised when the uploaded video cannot be written"""

    error_type = "storage"


class ExternalToolError(PipelineError):
    """Raised when ffmpeg is missing or exits non-zero"""

    error_type = "external_tool"

    def __init__(self, message: str, returncode: int | None = None, output: str = ""):
        super().__init__(message, details={"returncode": returncode, "output": output[-2000:]})
        self.returncode = returncode


class UpstreamServiceError(PipelineError):
    """Raised when a speech/translation service call fails"""

    error_type = "upstream_service"

    def __init__(self, service: str, message: str, status_code: int | None = None):
        super().__init__(message, details={"service": service, "status_code": status_code})
        self.service = service
        self.status_code = status_code


class SynthesisError(UpstreamServiceError):
    """Raised when text-to-speech yields no audio"""

    error_type = "synthesis"

    def __init__(self, message: str):
        super().__init__("tts", message)


class StageTimeoutError(PipelineError):
    """Raised when an external tool or service exceeds its time budget"""

    error_type = "timeout"

    def __init__(self, what: str, timeout: float):
        super().__init__(f"{what} timed out after {timeout:.0f}s", details={"timeout": timeout})
        self.timeout = timeout
