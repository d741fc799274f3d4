"""
Upload-and-generate workflow behind POST /api/process-video.
"""
import json
import logging
from typing import Any, Optional

from fastapi import UploadFile

from app.core.errors import AppError, GenerationError, NoUploadError
from app.services.generation_client import DEFAULT_CONTENT_TYPE, GenerationClient, GenerationParams

logger = logging.getLogger(__name__)


def parse_youtube_urls(raw: Optional[str]) -> Any:
    """Decode the youtubeUrls form field; anything unparseable becomes []."""
    try:
        return json.loads(raw or "[]")
    except ValueError:
        return []


def build_generation_params(
    instrumental: Optional[str] = None,
    song_title: Optional[str] = None,
    video_duration: Optional[str] = None,
    youtube_urls: Optional[str] = None,
    extra_description: Optional[str] = None,
    lyrics: Optional[str] = None,
) -> GenerationParams:
    # Empty strings fall back to the defaults too
    defaults = GenerationParams()
    return GenerationParams(
        instrumental=instrumental or defaults.instrumental,
        song_title=song_title or defaults.song_title,
        video_duration=video_duration or defaults.video_duration,
        youtube_urls=parse_youtube_urls(youtube_urls),
        extra_description=extra_description or defaults.extra_description,
        lyrics=lyrics or defaults.lyrics,
    )


def process_video(client: GenerationClient, video: Optional[UploadFile], params: GenerationParams) -> Any:
    """
    Ticket -> upload -> generate. Each step needs the previous one;
    the first failure aborts the chain and surfaces as GenerationError.
    """
    if video is None:
        raise NoUploadError()

    content_type = video.content_type or DEFAULT_CONTENT_TYPE
    try:
        ticket = client.request_upload_ticket()
        video.file.seek(0)
        client.upload(ticket, video.file, content_type)
        logger.info("Submitting generation job for %s (title=%s)", ticket.content_uri, params.song_title)
        return client.submit_generation_job(ticket.content_uri, params)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Generation workflow failed: %s", e)
        raise GenerationError(str(e)) from e
