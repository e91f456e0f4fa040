# scanner.py
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List

from .models import SUPPORTED_EXTENSIONS, TrackEntry

log = logging.getLogger(__name__)


def is_valid_audio(name: str) -> bool:
    return os.path.splitext(name)[1].lower() in SUPPORTED_EXTENSIONS


def _walk(root: str, current: str, out: List[TrackEntry]):
    full_dir = os.path.join(root, current)
    try:
        with os.scandir(full_dir) as it:
            entries = list(it)
    except OSError as e:
        # one bad subtree must not hide the rest of the library
        log.warning("Error reading directory %s: %s", full_dir, e)
        return

    for entry in entries:
        rel = os.path.join(current, entry.name)
        try:
            if entry.is_dir(follow_symlinks=False):
                _walk(root, rel, out)
            elif entry.is_file(follow_symlinks=False) and is_valid_audio(entry.name):
                st = entry.stat(follow_symlinks=False)
                out.append(TrackEntry(
                    rel_path=rel.replace(os.sep, "/"),
                    mtime=datetime.fromtimestamp(st.st_mtime),
                    file_size=st.st_size,
                ))
        except OSError as e:
            log.warning("Skipping %s: %s", os.path.join(root, rel), e)


def scan(root) -> List[TrackEntry]:
    """Recursively list audio files under `root`, newest first.

    Only files whose extension is in SUPPORTED_EXTENSIONS are returned.
    Directories that cannot be read are logged and skipped.
    """
    tracks: List[TrackEntry] = []
    _walk(os.fspath(root), "", tracks)
    # stable sort: equal mtimes keep traversal order
    tracks.sort(key=lambda t: t.mtime, reverse=True)
    return tracks


class LibraryScanner:
    """Always-fresh library index: every call re-walks the music directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def scan(self) -> List[TrackEntry]:
        return scan(self.root)
