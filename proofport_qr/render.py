"""
Output adapters for finished symbols: terminal text, SVG, PNG.

Requires Pillow for raster output: pip install Pillow
"""

import base64
import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from .exceptions import RenderError
from .symbol import QRSymbol

# Byte capacity of a version 40-L symbol
MAX_QR_DATA_SIZE = 2953

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

RGBA = Tuple[int, int, int, int]


@dataclass
class RenderOptions:
    """
    Shared rendering options.

    Args:
        width: Output width in pixels (raster) or user units (SVG)
        margin: Quiet zone in modules on each side
        dark_color: Foreground as #rgb, #rgba, #rrggbb or #rrggbbaa
        light_color: Background, same formats
    """

    width: int = 300
    margin: int = 2
    dark_color: str = "#000000"
    light_color: str = "#ffffff"

    def __post_init__(self):
        if self.margin < 0:
            raise RenderError(f"Margin must not be negative: {self.margin}")
        if self.width is not None and self.width <= 0:
            raise RenderError(f"Width must be positive: {self.width}")
        # fail early on bad colors
        parse_color(self.dark_color)
        parse_color(self.light_color)


def parse_color(value: str) -> RGBA:
    """Parse a hex color into an (r, g, b, a) tuple."""
    match = _HEX_COLOR.match(value or "")
    if not match:
        raise RenderError(f"Invalid hex color: {value!r}")

    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(d * 2 for d in digits)
    if len(digits) == 6:
        digits += "ff"

    return tuple(int(digits[i:i + 2], 16) for i in range(0, 8, 2))


def estimate_data_size(text: Union[str, bytes]) -> Tuple[int, bool]:
    """Payload size in bytes and whether it fits the largest symbol."""
    size = len(text) if isinstance(text, (bytes, bytearray)) else len(text.encode("utf-8"))
    return size, size <= MAX_QR_DATA_SIZE


#==============================================================================
# TEXT
#==============================================================================

def to_terminal(symbol: QRSymbol, margin: int = 2, invert: bool = False) -> str:
    """Render with two characters per module for a square look."""
    dark, light = ("  ", "██") if invert else ("██", "  ")
    width = symbol.size + 2 * margin
    blank = light * width

    lines = [blank] * margin
    for row in symbol.to_list():
        cells = "".join(dark if cell else light for cell in row)
        lines.append(light * margin + cells + light * margin)
    lines += [blank] * margin

    return "\n".join(lines)


#==============================================================================
# SVG
#==============================================================================

def _svg_color(attr: str, rgba: RGBA) -> str:
    r, g, b, a = rgba
    out = f'{attr}="#{r:02x}{g:02x}{b:02x}"'
    if a != 255:
        out += f' {attr}-opacity="{a / 255:.2f}"'
    return out


def to_svg(symbol: QRSymbol, options: Optional[RenderOptions] = None) -> str:
    """SVG document with one path covering all dark modules."""
    options = options or RenderOptions()
    margin = options.margin
    qr_size = symbol.size + 2 * margin
    dark = parse_color(options.dark_color)
    light = parse_color(options.light_color)

    path = []
    for y, row in enumerate(symbol.to_list()):
        x = 0
        while x < symbol.size:
            if not row[x]:
                x += 1
                continue
            start = x
            while x < symbol.size and row[x]:
                x += 1
            path.append(f"M{start + margin} {y + margin}h{x - start}v1h-{x - start}z")

    size_attr = f' width="{options.width}" height="{options.width}"' if options.width else ""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg"{size_attr} '
        f'viewBox="0 0 {qr_size} {qr_size}" shape-rendering="crispEdges">',
    ]
    if light[3]:
        parts.append(f'<path {_svg_color("fill", light)} d="M0 0h{qr_size}v{qr_size}H0z"/>')
    if path:
        parts.append(f'<path {_svg_color("fill", dark)} d="{"".join(path)}"/>')
    parts.append("</svg>\n")
    return "".join(parts)


#==============================================================================
# RASTER
#==============================================================================

def to_image(symbol: QRSymbol, options: Optional[RenderOptions] = None) -> Image.Image:
    """
    Pillow RGBA image of the symbol.

    Drawn at one pixel per module, then scaled with nearest-neighbour
    resampling so module edges stay sharp.
    """
    options = options or RenderOptions()
    margin = options.margin
    qr_size = symbol.size + 2 * margin
    dark = parse_color(options.dark_color)

    img = Image.new("RGBA", (qr_size, qr_size), parse_color(options.light_color))
    pixels = img.load()
    for y, row in enumerate(symbol.to_list()):
        for x, cell in enumerate(row):
            if cell:
                pixels[x + margin, y + margin] = dark

    width = max(options.width or qr_size, qr_size)
    if width != qr_size:
        img = img.resize((width, width), Image.NEAREST)
    return img


def to_png_bytes(symbol: QRSymbol, options: Optional[RenderOptions] = None) -> bytes:
    buf = io.BytesIO()
    to_image(symbol, options).save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(symbol: QRSymbol, options: Optional[RenderOptions] = None) -> str:
    """Base64 PNG data URL, ready for an <img src>."""
    encoded = base64.b64encode(to_png_bytes(symbol, options)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def save(symbol: QRSymbol, path: Union[str, Path], fmt: Optional[str] = None,
         options: Optional[RenderOptions] = None) -> Path:
    """Write the symbol to `path` as svg, png or txt (from the suffix if no fmt)."""
    path = Path(path)
    fmt = (fmt or path.suffix.lstrip(".") or "png").lower()
    options = options or RenderOptions()

    if fmt == "svg":
        path.write_text(to_svg(symbol, options), encoding="utf-8")
    elif fmt == "png":
        path.write_bytes(to_png_bytes(symbol, options))
    elif fmt in ("txt", "terminal"):
        path.write_text(to_terminal(symbol, options.margin) + "\n", encoding="utf-8")
    else:
        raise RenderError(f"Unsupported output format: {fmt}")
    return path
