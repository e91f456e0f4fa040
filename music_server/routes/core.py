import logging

from fastapi import APIRouter, HTTPException, Request

from ..models import LibraryListing
from ..streamer import StreamError, serve

log = logging.getLogger(__name__)

router = APIRouter(tags=["core"])


@router.get("/api/health")
def health():
    return {"ok": True}


@router.get("/api/library", response_model=LibraryListing)
def get_library(request: Request):
    scanner = request.app.state.scanner
    tracks = scanner.scan()
    return LibraryListing(root=str(scanner.root), count=len(tracks), tracks=tracks)


# {file_path:path} captures the rest of the URL, slashes included, as one string.
@router.api_route("/play/{file_path:path}", methods=["GET", "HEAD"])
def play(file_path: str, request: Request):
    settings = request.app.state.settings
    log.debug("%s /play/%s range=%s", request.method, file_path, request.headers.get("range"))
    try:
        return serve(
            settings.music_dir,
            file_path,
            request.headers.get("range"),
            method=request.method,
            chunk_size=settings.chunk_size,
        )
    except StreamError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail, headers=e.headers)
