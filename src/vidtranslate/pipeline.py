"""
The video dub pipeline: store -> extract -> transcribe -> translate -> synthesize -> remux.

Stages run strictly in order, each waiting for the previous one's output. Any
failure ends the run in Stage.FAILED; nothing is retried or resumed.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from . import io_ffmpeg
from .config import Settings
from .cost import estimate_costs
from .errors import PipelineError
from .google_rest import make_client
from .models import DUB_STAGES, PASSTHROUGH_STAGES, JobArtifacts, JobInput, JobResult, Stage
from .storage import plan_artifacts, remove_files, store_upload
from .stt import transcribe_google
from .translation import get_language_name, translate_text
from .tts import synthesize_speech

logger = logging.getLogger("vidtranslate")


class DubPipeline:
    """
    One pipeline run per instance.

    ``transport`` is handed to the httpx client so the HTTP services can be
    swapped out (e.g. ``httpx.MockTransport``).
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.settings = settings
        self.transport = transport
        self.stage: Stage | None = None
        self.history: list[Stage] = []
        self.artifacts: JobArtifacts | None = None
        self._order = DUB_STAGES if settings.dubbing_enabled else PASSTHROUGH_STAGES

    def _advance(self, stage: Stage) -> None:
        if stage is not Stage.FAILED:
            expected = self._order[len(self.history)] if len(self.history) < len(self._order) else None
            if stage is not expected:
                raise RuntimeError(f"Illegal stage transition {self.stage} -> {stage}")
        self.stage = stage
        self.history.append(stage)
        token = self.artifacts.token if self.artifacts else "-"
        logger.info("[%s] stage -> %s", token, stage.value)

    @contextmanager
    def _step(self, target: Stage) -> Iterator[None]:
        try:
            yield
        except PipelineError as e:
            if e.stage is None:
                e.stage = target.value
            raise
        self._advance(target)

    def run(self, job: JobInput, token: str | None = None) -> JobResult:
        """Process one job to completion; raises on any stage failure."""
        if self.history:
            raise RuntimeError("DubPipeline instances are single-use")
        self.artifacts = plan_artifacts(self.settings.upload_dir, job.original_filename, token)
        self._advance(Stage.RECEIVED)
        artifacts = self.artifacts

        try:
            if self.settings.dubbing_enabled:
                self.settings.require_api_keys()
            with self._step(Stage.STORED):
                store_upload(job.payload, artifacts.stored_video, self.settings.max_upload_bytes)

            if self.settings.dubbing_enabled:
                transcript, translated = self._dub(job, artifacts)
            else:
                transcript = translated = None
                with self._step(Stage.REMUXED):
                    io_ffmpeg.copy_streams(
                        artifacts.stored_video,
                        artifacts.output_video,
                        ffmpeg=self.settings.ffmpeg_bin,
                        timeout=self.settings.tool_timeout,
                    )
        except Exception as e:
            self._fail(e)
            raise

        self._advance(Stage.DONE)
        return JobResult(
            original_filename=job.original_filename,
            stored_filename=artifacts.stored_video.name,
            target_language=job.target_language,
            stored_video=artifacts.stored_video,
            output_video=artifacts.output_video,
            transcription=transcript,
            translated_text=translated,
        )

    def _dub(self, job: JobInput, artifacts: JobArtifacts) -> tuple[str, str]:
        s = self.settings
        logger.info(
            f"Dubbing {job.original_filename!r} into "
            f"{get_language_name(job.target_language)} ({job.target_language})"
        )
        audio_minutes: float | None = None

        # Intermediate audio is released on every exit path, not only success.
        try:
            with make_client(s.http_timeout, self.transport) as client:
                with self._step(Stage.AUDIO_EXTRACTED):
                    io_ffmpeg.extract_audio(
                        artifacts.stored_video,
                        artifacts.source_audio,
                        ffmpeg=s.ffmpeg_bin,
                        timeout=s.tool_timeout,
                    )
                try:
                    audio_minutes = io_ffmpeg.get_audio_duration_s(artifacts.source_audio) / 60.0
                except Exception as e:
                    logger.warning(f"Could not measure extracted audio: {e}")

                with self._step(Stage.TRANSCRIBED):
                    transcript = transcribe_google(
                        client, artifacts.source_audio, s.speech_api_key, url=s.speech_url
                    )
                with self._step(Stage.TRANSLATED):
                    translated = translate_text(
                        client, transcript, job.target_language, s.translate_api_key, url=s.translate_url
                    )
                with self._step(Stage.SYNTHESIZED):
                    synthesize_speech(
                        client,
                        translated,
                        job.target_language,
                        artifacts.dubbed_audio,
                        s.tts_api_key,
                        url=s.tts_url,
                    )
            with self._step(Stage.REMUXED):
                io_ffmpeg.mux_audio_to_video(
                    artifacts.stored_video,
                    artifacts.dubbed_audio,
                    artifacts.output_video,
                    ffmpeg=s.ffmpeg_bin,
                    timeout=s.tool_timeout,
                )
        finally:
            remove_files(*artifacts.intermediates)

        if audio_minutes is not None:
            est = estimate_costs(
                audio_minutes, transcript_chars=len(transcript), translated_chars=len(translated)
            )
            logger.info(
                f"[{artifacts.token}] estimated cost ${est['total']:.4f} "
                f"(stt ${est['stt_cost']:.4f}, translate ${est['translate_cost']:.4f}, "
                f"tts ${est['tts_cost']:.4f}; {audio_minutes:.2f} min)"
            )
        return transcript, translated

    def _fail(self, error: Exception) -> None:
        artifacts = self.artifacts
        stage = getattr(error, "stage", None) or (self.stage.value if self.stage else "-")
        logger.error("[%s] pipeline failed at %s: %s", artifacts.token, stage, error)
        # A failed request exposes nothing: drop partial output and the stored input.
        remove_files(*artifacts.intermediates, artifacts.output_video, artifacts.stored_video)
        self._advance(Stage.FAILED)
