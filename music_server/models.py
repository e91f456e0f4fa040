from datetime import datetime
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

MIME_TYPES = MappingProxyType({
    ".mp3": "audio/mpeg",
    ".flac": "audio/flac",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
})
SUPPORTED_EXTENSIONS = frozenset(MIME_TYPES)
DEFAULT_MIME = "application/octet-stream"


class TrackEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rel_path: str        # forward slashes, relative to the music root
    mtime: datetime
    file_size: int


class LibraryListing(BaseModel):
    root: str
    count: int
    tracks: list[TrackEntry]
