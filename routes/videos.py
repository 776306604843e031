from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, UploadFile

from config import Settings, get_settings
from errors import MissingInput, PayloadTooLarge
from models import Video, VideoRequest
from stores import VIDEOS, RecordStore, get_store
from utils import filter_by_course, upload_filename

logger = structlog.get_logger("routes.videos")

router = APIRouter(tags=["videos"])

_CHUNK = 1024 * 1024


# ----------------------------
# Course videos (teacher.html + course.html)
# ----------------------------

@router.get("/api/videos")
def list_videos(course: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return filter_by_course(store.load(VIDEOS, []), course)


@router.post("/api/videos", status_code=201)
def add_video(payload: Optional[VideoRequest] = None, store: RecordStore = Depends(get_store)):
    body = payload or VideoRequest()
    if not (body.course and body.title and body.src):
        raise MissingInput("course, title and src are required")

    video = Video(
        course=body.course,
        title=body.title,
        description=body.description or "",
        src=body.src,
        duration=body.duration or None,
    ).model_dump()
    with store.edit(VIDEOS, []) as videos:
        videos.append(video)

    logger.info("video_added", video_id=video["id"], course=video["course"])
    return {"message": "Video added", "video": video}


# ----------------------------
# Upload (does not touch the record store)
# ----------------------------

@router.post("/api/upload/video", status_code=201)
def upload_video(video: Optional[UploadFile] = File(None), settings: Settings = Depends(get_settings)):
    if video is None or not video.filename:
        raise MissingInput("No video file uploaded")
    if video.content_type not in settings.video_mime_types:
        logger.info("upload_rejected", content_type=video.content_type, filename=video.filename)
        raise MissingInput("Only video files are allowed")

    settings.video_dir.mkdir(parents=True, exist_ok=True)
    filename = upload_filename(video.filename)
    target = settings.video_dir / filename

    size = 0
    try:
        with target.open("wb") as out:
            while True:
                chunk = video.file.read(_CHUNK)
                if not chunk:
                    break
                size += len(chunk)
                if size > settings.max_upload_bytes:
                    raise PayloadTooLarge("Video file too large")
                out.write(chunk)
    except PayloadTooLarge:
        target.unlink(missing_ok=True)
        logger.info("upload_rejected", reason="too_large", filename=video.filename)
        raise
    except OSError:
        target.unlink(missing_ok=True)
        raise

    logger.info("video_uploaded", stored_as=filename, size=size)
    return {
        "message": "Video uploaded successfully",
        "videoUrl": f"/uploads/videos/{filename}",
        "originalName": video.filename,
        "size": size,
    }
