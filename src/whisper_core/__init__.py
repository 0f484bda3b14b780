"""whisper-core — whisper.cpp transcription engine wrapper."""

__version__ = '0.1.0'
