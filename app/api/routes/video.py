"""
Video → music generation proxy.
Receives the video via multipart and forwards it to ClipTune: upload
ticket, signed PUT, then the generation job. The ClipTune response body
is relayed unchanged.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from app.dependencies.services import get_generation_client
from app.services.generation_client import GenerationClient
from app.services.video_proxy import build_generation_params, process_video

router = APIRouter()


@router.post("/process-video")
def process_video_route(
    video: Optional[UploadFile] = File(None),
    youtube_urls: Optional[str] = Form(None, alias="youtubeUrls"),
    instrumental: Optional[str] = Form(None),
    song_title: Optional[str] = Form(None),
    video_duration: Optional[str] = Form(None),
    extra_description: Optional[str] = Form(None),
    lyrics: Optional[str] = Form(None),
    client: GenerationClient = Depends(get_generation_client),
):
    """
    Plain def so the long generation call runs in the threadpool.
    No size limit on the video; the generation call may take up to 30 minutes.
    """
    params = build_generation_params(
        instrumental=instrumental,
        song_title=song_title,
        video_duration=video_duration,
        youtube_urls=youtube_urls,
        extra_description=extra_description,
        lyrics=lyrics,
    )
    result = process_video(client, video, params)
    return JSONResponse(content=result)
