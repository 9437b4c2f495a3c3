"""
Audio and video processing utilities using ffmpeg.
"""

import logging
import subprocess
from pathlib import Path

from pydub import AudioSegment

from .config import SAMPLE_RATE
from .errors import ExternalToolError, StageTimeoutError

logger = logging.getLogger("vidtranslate")


def run(cmd: list[str], *, timeout: float | None = None) -> str:
    """Run a command, wait for it to exit and return its combined output."""
    logger.debug("Running: %s", " ".join(map(str, cmd)))
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ExternalToolError(f"Executable not found: {cmd[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise StageTimeoutError(Path(cmd[0]).name, timeout or 0.0) from e
    if proc.returncode != 0:
        logger.error("Command failed with code %d: %s", proc.returncode, proc.stdout)
        msg = f"Command failed with code {proc.returncode}"
        raise ExternalToolError(msg, returncode=proc.returncode, output=proc.stdout or "")
    return proc.stdout


def extract_audio(
    input_video: Path,
    out_wav: Path,
    *,
    ffmpeg: str = "ffmpeg",
    sample_rate: int = SAMPLE_RATE,
    timeout: float | None = None,
) -> None:
    """Extract the audio track as mono signed 16-bit little-endian PCM."""
    cmd = [
        ffmpeg,
        "-y",
        "-i",
        str(input_video),
        "-vn",
        "-acodec",
        "pcm_s16le",
        "-ar",
        str(sample_rate),
        "-ac",
        "1",
        str(out_wav),
    ]
    run(cmd, timeout=timeout)


def mux_audio_to_video(
    input_video: Path,
    audio_wav: Path,
    output_video: Path,
    *,
    ffmpeg: str = "ffmpeg",
    timeout: float | None = None,
) -> None:
    """Replace the audio of a video (copy video stream, AAC audio)."""
    cmd = [
        ffmpeg,
        "-y",
        "-i",
        str(input_video),
        "-i",
        str(audio_wav),
        "-c:v",
        "copy",
        "-c:a",
        "aac",
        "-map",
        "0:v:0",
        "-map",
        "1:a:0",
        str(output_video),
    ]
    run(cmd, timeout=timeout)


def copy_streams(
    input_video: Path, output_video: Path, *, ffmpeg: str = "ffmpeg", timeout: float | None = None
) -> None:
    """Rewrite a video with every stream copied unchanged."""
    run([ffmpeg, "-y", "-i", str(input_video), "-c", "copy", str(output_video)], timeout=timeout)


def get_audio_duration_s(wav_path: Path) -> float:
    """Duration of a WAV file in seconds."""
    return len(AudioSegment.from_wav(str(wav_path))) / 1000.0
