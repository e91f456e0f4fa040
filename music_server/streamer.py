# streamer.py
"""Byte-range streaming of files beneath the music root.

serve() resolves a client-supplied relative path, refuses anything that
escapes the root, and answers with the whole file (200) or one byte range
(206). All failures are raised as StreamError subclasses before any part of
the response is sent.
"""
import logging
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, Optional

from starlette.background import BackgroundTask
from starlette.responses import Response, StreamingResponse

from .models import DEFAULT_MIME, MIME_TYPES

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

# 19 digits bounds every offset a 64-bit file size can reach
_RANGE_RE = re.compile(r"bytes=(\d{1,19})-(\d{0,19})")


class StreamError(Exception):
    status_code = 500

    def __init__(self, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail)
        self.detail = detail
        self.headers = headers


class Forbidden(StreamError):
    status_code = 403


class NotFound(StreamError):
    status_code = 404


class RangeNotSatisfiable(StreamError):
    status_code = 416

    def __init__(self, file_size: int):
        super().__init__(
            "Requested range not satisfiable.",
            headers={"Content-Range": f"bytes */{file_size}"},
        )
        self.file_size = file_size


class InternalError(StreamError):
    status_code = 500


@dataclass(frozen=True)
class RangeSpec:
    start: int
    end: int  # inclusive

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, file_size: int) -> str:
        return f"bytes {self.start}-{self.end}/{file_size}"


def parse_range(header: str, file_size: int) -> RangeSpec:
    """Parse a single `bytes=start-[end]` specifier against `file_size`.

    Multi-range, suffix (`bytes=-N`) and out-of-bounds requests are all
    rejected with RangeNotSatisfiable.
    """
    m = _RANGE_RE.fullmatch(header.strip())
    if not m:
        raise RangeNotSatisfiable(file_size)
    start = int(m.group(1))
    end = int(m.group(2)) if m.group(2) else file_size - 1
    if start > end or end > file_size - 1:
        raise RangeNotSatisfiable(file_size)
    return RangeSpec(start, end)


def resolve_track_path(root: Path, requested: str) -> Path:
    """Join `requested` onto `root` and make sure the result stays strictly inside it."""
    base = Path(root).resolve()
    try:
        candidate = (base / requested).resolve()
    except ValueError:
        # e.g. embedded NUL byte
        raise Forbidden("Forbidden: Access is denied.")
    except (OSError, RuntimeError) as e:
        raise InternalError(str(e))
    if candidate == base or not candidate.is_relative_to(base):
        log.warning("Rejected path outside music root: %r", requested)
        raise Forbidden("Forbidden: Access is denied.")
    return candidate


def guess_mime(path: Path) -> str:
    return MIME_TYPES.get(path.suffix.lower(), DEFAULT_MIME)


def iter_file(fh: BinaryIO, start: int, length: int,
              chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield exactly `length` bytes from `fh` beginning at `start`, then close it."""
    try:
        fh.seek(start)
        remaining = length
        while remaining > 0:
            chunk = fh.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
    finally:
        fh.close()


def serve(root: Path, requested_path: str, range_header: Optional[str] = None,
          method: str = "GET", chunk_size: int = DEFAULT_CHUNK_SIZE) -> Response:
    path = resolve_track_path(root, requested_path)

    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        raise NotFound("File not found.")
    except OSError as e:
        raise InternalError(e.strerror or str(e))
    if not stat.S_ISREG(st.st_mode):
        raise NotFound("File not found.")

    file_size = st.st_size
    media = guess_mime(path)

    if range_header is not None:
        rng = parse_range(range_header, file_size)
        status = 206
        headers = {
            "Content-Range": rng.content_range(file_size),
            "Accept-Ranges": "bytes",
            "Content-Length": str(rng.length),
        }
    else:
        rng = RangeSpec(0, file_size - 1)
        status = 200
        headers = {
            "Accept-Ranges": "bytes",
            "Content-Length": str(file_size),
        }

    if method == "HEAD":
        return Response(status_code=status, headers=headers, media_type=media)

    try:
        fh = path.open("rb")
    except OSError as e:
        raise InternalError(e.strerror or str(e))

    # The background task also runs when the client disconnects mid-stream.
    return StreamingResponse(
        iter_file(fh, rng.start, rng.length, chunk_size),
        status_code=status,
        headers=headers,
        media_type=media,
        background=BackgroundTask(fh.close),
    )
