"""
HTTP client for the ClipTune music generation service.

Two-phase protocol: ask for a one-time upload ticket (signed PUT URL +
GCS URI), upload the video to it, then submit the generation job that
references the GCS URI. Generation is slow, the remote side answers only
once the track is ready.
"""
import json
import logging
from typing import Any, BinaryIO, NamedTuple

import requests
from pydantic import BaseModel, Field

from app.core.errors import GenerationError

logger = logging.getLogger(__name__)

TICKET_TIMEOUT_SECONDS = 60
DEFAULT_CONTENT_TYPE = "video/mp4"


class UploadTicket(NamedTuple):
    put_url: str
    content_uri: str


class GenerationParams(BaseModel):
    instrumental: str = "true"
    song_title: str = "test_clip"
    video_duration: str = "30"
    youtube_urls: Any = Field(default_factory=list)  # decoded JSON, normally a list
    extra_description: str = ""
    lyrics: str = ""

    def to_form(self, content_uri: str) -> dict:
        return {
            "instrumental": self.instrumental,
            "song_title": self.song_title,
            "video_duration": self.video_duration,
            "video_url": content_uri,
            "youtube_urls": json.dumps(self.youtube_urls, separators=(",", ":")),
            "extra_description": self.extra_description,
            "lyrics": self.lyrics,
        }


def _error_details(exc: requests.RequestException) -> Any:
    """Best available diagnostic: remote JSON body, then text body, then the message."""
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return response.json()
        except ValueError:
            if response.text:
                return response.text
    return str(exc)


def _body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class GenerationClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 1800,
        ticket_timeout: float = TICKET_TIMEOUT_SECONDS,
        session: requests.Session = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.ticket_timeout = ticket_timeout
        self.session = session or requests.Session()

    def request_upload_ticket(self) -> UploadTicket:
        try:
            response = self.session.post(f"{self.base_url}/upload-ticket", timeout=self.ticket_timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error("ClipTune upload ticket request failed: %s", e)
            raise GenerationError(_error_details(e)) from e

        try:
            return UploadTicket(put_url=data["put_url"], content_uri=data["gcs_uri"])
        except (KeyError, TypeError) as e:
            logger.error("ClipTune upload ticket missing fields: %r", data)
            raise GenerationError(data if data else str(e)) from e

    def upload(self, ticket: UploadTicket, stream: BinaryIO, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        """PUT the raw video to the signed URL. No size cap, no timeout."""
        try:
            response = self.session.put(
                ticket.put_url,
                data=stream,
                headers={"Content-Type": content_type or DEFAULT_CONTENT_TYPE},
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Upload to %s failed: %s", ticket.content_uri, e)
            raise GenerationError(_error_details(e)) from e
        logger.info("Uploaded video to %s", ticket.content_uri)

    def submit_generation_job(self, content_uri: str, params: GenerationParams) -> Any:
        try:
            response = self.session.post(
                f"{self.base_url}/generate",
                data=params.to_form(content_uri),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("ClipTune generation failed for %s: %s", content_uri, e)
            raise GenerationError(_error_details(e)) from e
        return _body(response)
