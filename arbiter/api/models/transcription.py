"""Transcription preview models."""

from pydantic import BaseModel, Field


class TranscribeRequest(BaseModel):
    """Audio to transcribe without storing anything."""

    audio_base64: str = Field(..., min_length=1, description="Base64 audio or data URL")
    mime_type: str | None = None


class TranscribeResponse(BaseModel):
    """Transcription preview."""

    transcription: str
    duration: float | None = None
    language: str | None = None
