"""
Data models for the video translation pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO


class Stage(str, Enum):
    """Pipeline states, in the only order they can be visited."""

    RECEIVED = "received"
    STORED = "stored"
    AUDIO_EXTRACTED = "audio_extracted"
    TRANSCRIBED = "transcribed"
    TRANSLATED = "translated"
    SYNTHESIZED = "synthesized"
    REMUXED = "remuxed"
    DONE = "done"
    FAILED = "failed"


DUB_STAGES = (
    Stage.RECEIVED,
    Stage.STORED,
    Stage.AUDIO_EXTRACTED,
    Stage.TRANSCRIBED,
    Stage.TRANSLATED,
    Stage.SYNTHESIZED,
    Stage.REMUXED,
    Stage.DONE,
)

PASSTHROUGH_STAGES = (Stage.RECEIVED, Stage.STORED, Stage.REMUXED, Stage.DONE)


@dataclass(frozen=True)
class JobInput:
    """An uploaded video and the language to dub it into."""

    payload: BinaryIO
    original_filename: str
    target_language: str


@dataclass(frozen=True)
class JobArtifacts:
    """Every file a single request may create, all named after one token."""

    token: str
    stored_video: Path
    source_audio: Path  # extracted, 16 kHz mono PCM16
    dubbed_audio: Path  # synthesized
    output_video: Path

    @classmethod
    def for_token(cls, upload_dir: Path, token: str, extension: str) -> "JobArtifacts":
        stored_name = f"{token}{extension}"
        return cls(
            token=token,
            stored_video=upload_dir / stored_name,
            source_audio=upload_dir / f"{token}_source.wav",
            dubbed_audio=upload_dir / f"{token}_dub.wav",
            output_video=upload_dir / f"translated_{stored_name}",
        )

    @property
    def intermediates(self) -> tuple[Path, Path]:
        return (self.source_audio, self.dubbed_audio)


@dataclass
class JobResult:
    """Outcome of a completed pipeline run."""

    original_filename: str
    stored_filename: str
    target_language: str
    stored_video: Path
    output_video: Path
    transcription: str | None = None  # None in passthrough mode
    translated_text: str | None = None
    status: str = "completed"
