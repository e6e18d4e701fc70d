from typing import Optional

from loguru import logger

from hookscope.exceptions import ProviderException
from hookscope.providers.base import TranscriptionProvider
from hookscope.utils.error_handler import ErrorHandler

TRANSCRIPTION_FAILED = "[Transcription failed]"
NO_AUDIO = "[No audio]"
TRANSCRIPTION_QUOTA_EXCEEDED = "[Transcription failed: quota exceeded for '{owner_tag}' credentials]"


def quota_owner(e: Exception, fallback: Optional[str]) -> str:
    """Owner tag of the credential pool an error was billed to."""
    details = getattr(e, "details", None) or {}
    return details.get("owner_tag") or fallback or "default"


class TranscriptionStage:
    """
    Speech-to-text over the extracted audio track.

    Never raises for provider trouble: the caller always gets text, either
    the transcript or one of the bracketed markers above.
    """

    def __init__(self, provider: TranscriptionProvider, language: str = "es", owner_tag: Optional[str] = None):
        self.provider = provider
        self.language = language
        self.owner_tag = owner_tag

    async def transcribe(self, audio_path: Optional[str]) -> str:
        if not audio_path:
            logger.info("No audio track; skipping transcription")
            return NO_AUDIO

        logger.info(f"Transcribing {audio_path} (language={self.language})")
        try:
            text = await self.provider.transcribe_file(audio_path, language=self.language)
        except ProviderException as e:
            if ErrorHandler.is_quota_error(e):
                owner = quota_owner(e, self.owner_tag)
                logger.warning(f"Transcription quota exhausted for '{owner}' credentials")
                return TRANSCRIPTION_QUOTA_EXCEEDED.format(owner_tag=owner)
            logger.warning(f"Transcription failed: {e}")
            return TRANSCRIPTION_FAILED
        except Exception:
            logger.exception("Unexpected transcription error")
            return TRANSCRIPTION_FAILED

        text = (text or "").strip()
        logger.info(f"Transcription finished: {len(text)} characters")
        return text
