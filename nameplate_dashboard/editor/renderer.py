# nameplate_dashboard/editor/renderer.py
"""
Rasterize a draft to PNG with Pillow.

Layout mirrors the editor preview: background stretched to the plate, house
name on top, owner name in the middle, address at the bottom, each centered in
its own color and size. A background that cannot be loaded within the timeout
is replaced by plain white.
"""
import io
import os
from typing import Optional

import httpx
from PIL import Image, ImageColor, ImageDraw, ImageFont, UnidentifiedImageError

from nameplate_dashboard.editor.store import Draft
from nameplate_dashboard.logger import get_logger

logger = get_logger(__name__)

PLATE_WIDTH = 600
PLATE_HEIGHT = 300
PIXEL_RATIO = 2
BACKGROUND_TIMEOUT = 3.0
FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "arialbd.ttf", "Arial Bold.ttf")


class BackgroundLoader:
    """
    Resolves a background path like ``/backgrounds/acc/d1.webp``.

    A file under ``asset_dir`` wins; otherwise the image is fetched from
    ``base_url`` with ``timeout`` seconds. Returns None on any failure.
    """

    def __init__(
        self,
        *,
        asset_dir: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = BACKGROUND_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.asset_dir = asset_dir
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = timeout
        self._client = client

    def _local_path(self, background: str) -> Optional[str]:
        if not self.asset_dir:
            return None
        path = os.path.join(self.asset_dir, background.lstrip("/"))
        return path if os.path.isfile(path) else None

    def _fetch(self, url: str) -> bytes:
        if self._client is not None:
            response = self._client.get(url, timeout=self.timeout)
        else:
            response = httpx.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def load(self, background: str) -> Optional[Image.Image]:
        if not background:
            return None
        try:
            local = self._local_path(background)
            if local:
                with Image.open(local) as img:
                    return img.convert("RGB")
            if background.startswith(("http://", "https://")):
                url = background
            elif self.base_url:
                url = f"{self.base_url}/{background.lstrip('/')}"
            else:
                logger.warning(f"no source for background {background}")
                return None
            return Image.open(io.BytesIO(self._fetch(url))).convert("RGB")
        except httpx.TimeoutException:
            logger.warning(f"background load timed out after {self.timeout}s: {background}")
        except (httpx.HTTPError, OSError, UnidentifiedImageError) as exc:
            logger.warning(f"background load failed {background}: {exc}")
        return None


def _font(size: int):
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _color(value: str, fallback: str = "#000000"):
    try:
        return ImageColor.getrgb(value or fallback)
    except ValueError:
        return ImageColor.getrgb(fallback)


def render_draft(draft: Draft, *, loader: Optional[BackgroundLoader] = None) -> bytes:
    """Render ``draft`` to PNG bytes."""
    width, height = PLATE_WIDTH * PIXEL_RATIO, PLATE_HEIGHT * PIXEL_RATIO
    background = (loader or BackgroundLoader()).load(draft.background)

    if background is None:
        canvas = Image.new("RGB", (width, height), "white")
    else:
        canvas = background.resize((width, height))

    draw = ImageDraw.Draw(canvas)
    lines = (
        (draft.house_name, draft.house_name_color, draft.house_name_size, 0.25),
        (draft.owner_name, draft.owner_name_color, draft.owner_name_size, 0.5),
        (draft.address, draft.address_color, draft.address_size, 0.78),
    )
    for text, color, size, y_ratio in lines:
        if not text:
            continue
        draw.text(
            (width // 2, int(height * y_ratio)),
            text,
            fill=_color(color),
            font=_font(int(size) * PIXEL_RATIO),
            anchor="mm",
        )

    out = io.BytesIO()
    canvas.save(out, format="PNG")
    return out.getvalue()
