"""Domain error types.

Every public operation either returns its documented result or raises exactly
one of these. ``code`` is the stable identifier handed to the host bridge.
"""

from __future__ import annotations


class WhisperError(Exception):
    """Base class for all transcription-engine failures."""

    code = 'unknown'
    default_message = 'Unknown whisper error.'

    def __init__(self, detail: str = '') -> None:
        self.detail = detail
        super().__init__(detail or self.default_message)


class NotReadyError(WhisperError):
    """Raised when an operation needs a loaded model and none is loaded."""

    code = 'modelNotLoaded'
    default_message = 'No model is currently loaded. Please load a model first.'


class AudioError(WhisperError):
    """Raised when an audio source cannot be turned into model input."""


class SourceNotFoundError(AudioError):
    code = 'fileNotFound'
    default_message = 'The specified audio file could not be found.'


class UnsupportedFormatError(AudioError):
    code = 'unsupportedFormat'
    default_message = 'The audio file format is not supported.'


class InsufficientMemoryError(AudioError):
    code = 'insufficientMemory'
    default_message = 'Insufficient memory to process the audio file.'


class ModelNotFoundError(WhisperError):
    """Raised when no model file can be located (or acquired) for a name."""

    code = 'modelNotFound'
    default_message = 'Model not found.'


class ModelLoadFailedError(WhisperError):
    """Raised when the engine refuses to create a context from a model file."""

    code = 'modelLoadFailed'
    default_message = 'Failed to load model.'


class InferenceFailedError(WhisperError):
    """Raised when the engine's full-inference call reports failure."""

    code = 'transcriptionFailed'
    default_message = 'Transcription failed.'

    def __init__(self, detail: str = '', status: int | None = None) -> None:
        self.status = status
        super().__init__(detail)


class InvalidOptionsError(WhisperError):
    """Raised when a bridge payload does not validate against the options schema."""

    code = 'invalidOptions'
    default_message = 'Invalid options.'
