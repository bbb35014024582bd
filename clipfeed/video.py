"""Video publishing, uploads, feeds and statistics."""

from __future__ import annotations

import enum
import io
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Protocol, runtime_checkable

_log = logging.getLogger(__name__)

CHUNK_SIZE = 4 * 1024 * 1024
_PUBLISH_LIST_LIMIT = 100
_STATS_FIELDS = {
    "favorite": "favorite_count",
    "comment": "comment_count",
    "play": "play_count",
}
_NO_MULTIPART = "storage does not support multipart upload"


class VideoStatus(enum.Enum):
    """Lifecycle state of a video."""

    PENDING = "pending"
    PUBLISHED = "published"


@dataclass
class Video:
    """A published or pending video."""

    id: int
    author_id: int
    title: str
    play_url: str = ""
    cover_url: str = ""
    favorite_count: int = 0
    comment_count: int = 0
    play_count: int = 0
    status: VideoStatus = VideoStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class BusinessConfig:
    """Settings the video rules depend on."""

    default_feed_limit: int = 30
    video_upload_topic: str = "video-upload"
    video_stats_topic: str = "video-stats"
    video_process_topic: str = "video-process"


@dataclass
class UploadConfig:
    """Upload limits advertised to clients."""

    max_file_size: int
    supported_formats: list[str]
    chunk_size: int
    enable_resume: bool


@dataclass
class UploadProgress:
    """State of an upload in flight."""

    upload_id: str
    progress: int
    status: str
    total_size: int = 0
    uploaded_size: int = 0
    error_message: str = ""
    estimated_time: int = 0


@runtime_checkable
class _MultipartStorage(Protocol):
    def initiate_multipart_upload(self, filename: str, **options: Any) -> Any: ...

    def upload_part(self, upload_id: str, part_number: int, reader: Any, size: int) -> Any: ...

    def complete_multipart_upload(self, upload_id: str, parts: list) -> Any: ...

    def abort_multipart_upload(self, upload_id: str) -> None: ...

    def list_parts(self, upload_id: str) -> list: ...


@runtime_checkable
class _ResumableStorage(Protocol):
    def get_upload_progress(self, upload_id: str) -> int: ...


def _video_object_name(filename: str) -> str:
    _, ext = os.path.splitext(filename)
    return f"{uuid.uuid4().hex}{ext.lower()}"


def _object_name(url: str) -> str:
    return url.split("/")[-1]


def _read_all(source: Any) -> bytes:
    if hasattr(source, "read"):
        return source.read()
    return bytes(source)


class VideoUsecase:
    """Business rules for videos.

    Collaborators are duck-typed: ``repo`` persists videos, ``cache`` holds
    feeds and counters (a miss is ``None``), ``storage`` keeps the files and
    may also support multipart or resumable uploads, ``processor`` checks
    formats and makes thumbnails, ``validator`` raises on bad input,
    ``id_generator`` returns fresh ids and ``events`` (may be ``None``)
    publishes messages to topics.
    """

    def __init__(
        self,
        repo: Any,
        cache: Any,
        storage: Any,
        processor: Any,
        validator: Any,
        config: BusinessConfig,
        id_generator: Callable[[], int],
        events: Any = None,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._storage = storage
        self._processor = processor
        self._validator = validator
        self._config = config
        self._next_id = id_generator
        self._events = events

    # publishing

    def publish_video(self, author_id: int, title: str, video_data: bytes, filename: str) -> Video:
        """Store the file, make a cover, record the video and announce it."""
        self._validator.validate_video_title(title)
        self._processor.validate_format(filename, len(video_data))

        video_id = self._next_id()

        try:
            play_url = self._storage.upload_video(
                _video_object_name(filename), io.BytesIO(video_data), len(video_data)
            )
        except Exception as exc:
            _log.error("upload video to storage failed: %s", exc)
            raise RuntimeError("video upload failed") from exc

        try:
            cover_url = self._upload_cover(video_id)
        except Exception as exc:
            _log.warning("generate cover failed: %s", exc)
            cover_url = ""

        video = Video(
            id=video_id,
            author_id=author_id,
            title=title,
            play_url=play_url,
            cover_url=cover_url,
            status=VideoStatus.PUBLISHED,
        )

        try:
            self._repo.create_video(video)
        except Exception:
            self._cleanup_uploaded_files(play_url, cover_url)
            raise

        self._publish_uploaded_event(video)
        self._request_processing(video)

        _log.info("video published successfully: %d", video_id)
        return video

    # multipart uploads

    def initiate_multipart_upload(
        self, filename: str, total_size: int, content_type: str, title: str
    ) -> Any:
        self._processor.validate_format(filename, total_size)
        self._validator.validate_video_title(title)
        storage = self._multipart_storage()
        return storage.initiate_multipart_upload(
            filename,
            content_type=content_type,
            chunk_size=CHUNK_SIZE,
            metadata={"title": title, "filename": filename},
        )

    def upload_part(self, upload_id: str, part_number: int, reader: Any, size: int) -> Any:
        return self._multipart_storage().upload_part(upload_id, part_number, reader, size)

    def complete_multipart_upload(
        self, upload_id: str, parts: list, title: str, user_id: int
    ) -> Video:
        """Assemble the parts and record a pending video for them."""
        storage = self._multipart_storage()
        file_info = storage.complete_multipart_upload(upload_id, parts)

        video = Video(
            id=self._next_id(),
            author_id=user_id,
            title=title,
            play_url=file_info.url,
            status=VideoStatus.PENDING,
        )
        self._repo.create_video(video)
        self._publish_uploaded_event(video)
        return video

    def abort_multipart_upload(self, upload_id: str) -> None:
        self._multipart_storage().abort_multipart_upload(upload_id)

    def list_uploaded_parts(self, upload_id: str) -> list:
        return self._multipart_storage().list_parts(upload_id)

    # reading

    def get_feed(self, latest_time: int, limit: int) -> tuple[list[Video], int]:
        """Return a page of the feed before ``latest_time`` and the next cursor."""
        default_limit = self._config.default_feed_limit
        if limit <= 0 or limit > default_limit:
            limit = default_limit

        feed_time = datetime.fromtimestamp(latest_time) if latest_time > 0 else datetime.now()

        cached = self._cache.get_feed_videos(latest_time)
        if cached is not None and len(cached) >= limit:
            return cached[:limit], self._next_time(cached, limit)

        videos = self._repo.get_feed_videos(feed_time, limit)
        if videos:
            self._cache.set_feed_videos(latest_time, videos)
        return videos, self._next_time(videos, limit)

    def get_publish_list(self, user_id: int) -> list[Video]:
        self._validator.validate_user_id(user_id)
        return self._repo.get_user_videos(user_id, _PUBLISH_LIST_LIMIT)

    def get_video(self, video_id: int) -> Video:
        """Fetch a video and count the view."""
        self._validator.validate_video_id(video_id)
        video = self._repo.get_video(video_id)
        try:
            self.increment_play_count(video_id)
        except Exception as exc:
            _log.warning("increment play count failed: %s", exc)
        return video

    def get_videos(self, video_ids: list[int]) -> list[Video]:
        if not video_ids:
            return []
        return self._repo.get_videos(video_ids)

    # statistics

    def update_video_stats(self, video_id: int, stats_type: str, delta: int) -> None:
        """Add ``delta`` to a counter: ``favorite``, ``comment`` or ``play``."""
        self._validator.validate_video_id(video_id)
        try:
            field_name = _STATS_FIELDS[stats_type]
        except KeyError:
            raise ValueError(f"invalid stats type: {stats_type}") from None

        self._repo.update_video_stats(video_id, field_name, delta)
        self._cache.incr_video_stats(video_id, field_name, delta)
        self._send(
            "send_video_stats_event",
            self._config.video_stats_topic,
            {"video_id": video_id, "stats_type": stats_type, "count": delta, "user_id": 0},
            "send video stats event failed",
        )

    def increment_play_count(self, video_id: int) -> None:
        self.update_video_stats(video_id, "play", 1)

    def increment_favorite_count(self, video_id: int) -> None:
        self.update_video_stats(video_id, "favorite", 1)

    def decrement_favorite_count(self, video_id: int) -> None:
        self.update_video_stats(video_id, "favorite", -1)

    def increment_comment_count(self, video_id: int) -> None:
        self.update_video_stats(video_id, "comment", 1)

    def decrement_comment_count(self, video_id: int) -> None:
        self.update_video_stats(video_id, "comment", -1)

    # upload information

    def get_upload_config(self) -> UploadConfig:
        return UploadConfig(
            max_file_size=self._processor.max_file_size,
            supported_formats=list(self._processor.supported_formats),
            chunk_size=CHUNK_SIZE,
            enable_resume=True,
        )

    def get_upload_progress(self, upload_id: str) -> UploadProgress:
        if isinstance(self._storage, _ResumableStorage):
            uploaded = self._storage.get_upload_progress(upload_id)
            return UploadProgress(
                upload_id=upload_id,
                progress=50,
                status="uploading",
                uploaded_size=uploaded,
            )
        return UploadProgress(upload_id=upload_id, progress=100, status="completed")

    # updates

    def update_video_cover(self, video_id: int, cover_url: str) -> None:
        self._repo.update_video_cover(video_id, cover_url)
        self._cache.delete_video(video_id)

    def update_video_play_url(self, video_id: int, play_url: str) -> None:
        self._repo.update_video_play_url(video_id, play_url)
        self._cache.delete_video(video_id)

    # helpers

    def _multipart_storage(self) -> Any:
        if not isinstance(self._storage, _MultipartStorage):
            raise RuntimeError(_NO_MULTIPART)
        return self._storage

    def _upload_cover(self, video_id: int) -> str:
        cover_data = _read_all(self._processor.generate_default_thumbnail())
        return self._storage.upload_cover(
            f"cover_{video_id}.jpg", io.BytesIO(cover_data), len(cover_data)
        )

    def _cleanup_uploaded_files(self, play_url: str, cover_url: str) -> None:
        for url, what in ((play_url, "video"), (cover_url, "cover")):
            if not url:
                continue
            try:
                self._storage.delete(_object_name(url))
            except Exception as exc:
                _log.warning("cleanup %s file failed: %s", what, exc)

    def _send(self, method: str, topic: str, event: dict, failure: str) -> None:
        if self._events is None:
            return
        try:
            getattr(self._events, method)(topic, event)
        except Exception as exc:
            _log.error("%s: %s", failure, exc)

    def _publish_uploaded_event(self, video: Video) -> None:
        self._send(
            "send_video_upload_event",
            self._config.video_upload_topic,
            {
                "video_id": video.id,
                "author_id": video.author_id,
                "title": video.title,
                "play_url": video.play_url,
                "upload_time": int(video.created_at.timestamp()),
            },
            "send video upload event failed",
        )

    def _request_processing(self, video: Video) -> None:
        self._send(
            "send_video_process_event",
            self._config.video_process_topic,
            {"video_id": video.id, "process_type": "transcode", "status": "processing"},
            "send video process event failed",
        )

    @staticmethod
    def _next_time(videos: list[Video], limit: int) -> int:
        if not videos:
            return 0
        last = limit - 1 if len(videos) > limit else len(videos) - 1
        return int(videos[last].created_at.timestamp())