"""Transcription worker — runs blocking transcriptions off the caller's thread."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from collections.abc import Callable, Mapping
from typing import Any

from whisper_core.l1_entities.errors import WhisperError
from whisper_core.l1_entities.options import TranscribeFileOptions
from whisper_core.l1_entities.transcript import ProgressCallback, TranscriptionResult
from whisper_core.l3_interface_adapters.controllers.whisper_controller import WhisperController

log = logging.getLogger('wcore.worker')

# (error code, message)
ErrorCallback = Callable[[str, str], None]


class TranscriptionWorker:
    """Single background thread in front of a WhisperController.

    Requests queue behind each other (the session admits one inference at a
    time). There is no mid-inference cancellation: cancelling a returned future
    only abandons the result once it has started.

    ``on_error`` is told the code and message of every failed transcription
    before the exception is set on the future.
    """

    def __init__(self, controller: WhisperController, on_error: ErrorCallback | None = None) -> None:
        self._controller = controller
        self._on_error = on_error
        self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix='wcore-transcribe')

    def __enter__(self) -> TranscriptionWorker:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def submit(
        self,
        options: TranscribeFileOptions | Mapping[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> concurrent.futures.Future[TranscriptionResult]:
        return self._executor.submit(self._run, options, on_progress)

    async def transcribe_async(
        self,
        options: TranscribeFileOptions | Mapping[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> TranscriptionResult:
        """Await a transcription from an asyncio event loop without blocking it.

        ``on_progress`` runs on the worker thread, not the event loop.
        """
        return await asyncio.wrap_future(self.submit(options, on_progress))

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _run(
        self,
        options: TranscribeFileOptions | Mapping[str, Any],
        on_progress: ProgressCallback | None,
    ) -> TranscriptionResult:
        try:
            return self._controller.transcribe_file(options, on_progress)
        except Exception as exc:
            log.error('Transcription failed: %s', exc, exc_info=True)
            if self._on_error is not None:
                code = exc.code if isinstance(exc, WhisperError) else WhisperError.code
                self._on_error(code, str(exc))
            raise
