from __future__ import annotations

import base64
import binascii
from typing import Protocol


class DrawingSurface(Protocol):
    """Freehand drawing surface the canvas engine gates.

    Stroke tracking itself happens on the client; the engine only snapshots,
    clears, reloads and exports whole rasters.
    """

    def snapshot(self) -> bytes:  # pragma: no cover
        ...

    def clear(self) -> None:  # pragma: no cover
        ...

    def load(self, image: bytes) -> None:  # pragma: no cover
        ...

    def export(self) -> bytes:  # pragma: no cover
        ...

    def set_stroke(self, *, color: str, width: int) -> None:  # pragma: no cover
        ...


def decode_data_url(data_url: str) -> bytes:
    """Decode a `data:<mime>;base64,<payload>` URL (canvas.toDataURL output)."""

    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Expected a base64 data URL")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def encode_data_url(image: bytes, *, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(image).decode('ascii')}"


class MemorySurface:
    """Server-side mirror of the browser canvas.

    The browser uploads its raster after each stroke batch (`upload`); the
    engine's clear/load effects replace it, and the browser re-renders from
    `image` on the next game update.
    """

    def __init__(self, *, blank: bytes = b"") -> None:
        self._blank = blank
        self.image = blank
        self.stroke_color = "#000000"
        self.stroke_width = 5

    def upload(self, image: bytes) -> None:
        self.image = image

    def snapshot(self) -> bytes:
        return self.image

    def clear(self) -> None:
        self.image = self._blank

    def load(self, image: bytes) -> None:
        self.image = image

    def export(self) -> bytes:
        return self.image

    def set_stroke(self, *, color: str, width: int) -> None:
        self.stroke_color = color
        self.stroke_width = width
