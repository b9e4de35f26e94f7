"""
proofport-qr: QR code symbol encoder for proof request deep links.

Implements the full ISO/IEC 18004 encoding pipeline without external QR
libraries: GF(256) Reed-Solomon coding, optimal mode segmentation, matrix
layout and mask selection. Pillow is used only for raster output.
"""

from .exceptions import (
    QRCodeError,
    EmptyInputError,
    EncodingModeError,
    InvalidCharacterError,
    DataOverflowError,
    VersionTooSmallError,
    FieldError,
    EncoderNotInitializedError,
    InvalidVersionError,
    InvalidLevelError,
    InvalidMaskError,
    FormatInfoError,
    RenderError,
)

from .modes import (
    Mode,
    NUMERIC,
    ALPHANUMERIC,
    BYTE,
    KANJI,
    shift_jis_code,
)

from .symbol import (
    QRSymbol,
    QRCodeGenerator,
    create,
)

from .render import (
    MAX_QR_DATA_SIZE,
    RenderOptions,
    estimate_data_size,
    to_terminal,
    to_svg,
    to_image,
    to_png_bytes,
    to_data_url,
    save,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "QRCodeError",
    "EmptyInputError",
    "EncodingModeError",
    "InvalidCharacterError",
    "DataOverflowError",
    "VersionTooSmallError",
    "FieldError",
    "EncoderNotInitializedError",
    "InvalidVersionError",
    "InvalidLevelError",
    "InvalidMaskError",
    "FormatInfoError",
    "RenderError",
    # Modes
    "Mode",
    "NUMERIC",
    "ALPHANUMERIC",
    "BYTE",
    "KANJI",
    "shift_jis_code",
    # Symbol
    "QRSymbol",
    "QRCodeGenerator",
    "create",
    # Rendering
    "MAX_QR_DATA_SIZE",
    "RenderOptions",
    "estimate_data_size",
    "to_terminal",
    "to_svg",
    "to_image",
    "to_png_bytes",
    "to_data_url",
    "save",
    # Meta
    "__version__",
]
