from html import escape
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse

from ..models import TrackEntry

router = APIRouter(tags=["ui"])

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"


def play_url(rel_path: str) -> str:
    return "/play/" + "/".join(quote(seg) for seg in rel_path.split("/"))


def _human_size(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    size = n / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def _row(t: TrackEntry) -> str:
    name = escape(t.rel_path.rsplit("/", 1)[-1])
    folder = escape(t.rel_path.rsplit("/", 1)[0]) if "/" in t.rel_path else ""
    url = escape(play_url(t.rel_path), quote=True)
    added = t.mtime.strftime("%Y-%m-%d %H:%M")
    return f"""
      <tr data-src="{url}">
        <td><button class="btn" onclick="playRow(this)">▶</button></td>
        <td>{name}</td>
        <td class="muted">{folder}</td>
        <td class="muted">{added}</td>
        <td class="muted">{_human_size(t.file_size)}</td>
      </tr>"""


def render_index(tracks: list[TrackEntry]) -> str:
    rows_html = "\n".join(_row(t) for t in tracks) or "<tr><td colspan='5'>No tracks found.</td></tr>"

    # Note every { and } in CSS/JS is doubled {{ }} inside this f-string.
    return f"""<!doctype html>
<html>
<head>
<meta charset="utf-8"/>
<meta name="viewport" content="width=device-width, initial-scale=1"/>
<title>Music</title>
<link rel="icon" href="/icon.svg" type="image/svg+xml"/>
<link rel="stylesheet" href="/style.css"/>
</head>
<body>
<div class="playerbar">
  <audio id="player" controls preload="none"></audio>
  <div><b>Now Playing:</b> <span id="now">—</span></div>
</div>
<main>
  <p>{len(tracks)} tracks, newest first.</p>
  <table>
    <thead><tr><th></th><th>Title</th><th>Folder</th><th>Added</th><th>Size</th></tr></thead>
    <tbody>{rows_html}</tbody>
  </table>
</main>
<script>
const rows = Array.from(document.querySelectorAll('tbody tr[data-src]'));
let current = -1;

function playIndex(i) {{
  if (i < 0 || i >= rows.length) return;
  current = i;
  const audio = document.getElementById('player');
  audio.src = rows[i].getAttribute('data-src');
  audio.play().catch(() => {{}});
  document.getElementById('now').innerText = rows[i].children[1].innerText;
  rows.forEach((r, j) => r.classList.toggle('playing', j === i));
}}

function playRow(btn) {{
  playIndex(rows.indexOf(btn.closest('tr')));
}}

document.getElementById('player').addEventListener('ended', () => playIndex(current + 1));
</script>
</body>
</html>"""


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    tracks = request.app.state.scanner.scan()
    return HTMLResponse(render_index(tracks), status_code=200)


def _asset(name: str, media_type: str) -> FileResponse:
    path = ASSETS_DIR / name
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(path, media_type=media_type)


@router.get("/style.css")
def style():
    return _asset("style.css", "text/css")


@router.get("/icon.svg")
def icon():
    return _asset("icon.svg", "image/svg+xml")
