"""HTML views for the gallery and the login form.

Templates are plain HTML files with ``{{ name }}`` placeholders filled by
string substitution. Every value coming from the filesystem or the user is
escaped before insertion.
"""
import html
from pathlib import Path
from typing import Iterable, Optional

from imagehost.storage.schemas import StoredImage

TEMPLATES_DIR = Path(__file__).parent / "templates"

_CARD = """    <figure class="card">
      <a href="{url}" target="_blank"><img src="{url}" alt="{name}" loading="lazy"></a>
      <div class="meta">
        <span class="name" title="{name}">{name}</span>
        <form method="post" action="/delete">
          <input type="hidden" name="filename" value="{name}">
          <button type="submit" class="delete">Delete</button>
        </form>
      </div>
    </figure>"""

_EMPTY = '    <p class="empty">No images yet.</p>'


def _load(name: str) -> str:
    return (TEMPLATES_DIR / name).read_text(encoding="utf-8")


def _error_block(error: Optional[str]) -> str:
    if not error:
        return ""
    return f'<p class="error">{html.escape(error)}</p>'


def render_login(error: Optional[str] = None) -> str:
    """Login page, optionally with an error message above the form."""
    return _load("login.html").replace("{{ error }}", _error_block(error))


def render_gallery(filenames: Iterable[str], error: Optional[str] = None) -> str:
    """Gallery grid with upload form and one delete button per image.

    Args:
        filenames: Stored image names, rendered in the given order.
        error: Optional upload error shown next to the upload form.
    """
    images = [StoredImage(filename=name) for name in filenames]
    cards = "\n".join(
        _CARD.format(
            url=html.escape(image.url),
            name=html.escape(image.filename),
        )
        for image in images
    )

    content = _load("gallery.html")
    content = content.replace("{{ count }}", str(len(images)))
    content = content.replace("{{ error }}", _error_block(error))
    content = content.replace("{{ images }}", cards or _EMPTY)
    return content
