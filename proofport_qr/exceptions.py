"""
Exceptions raised by the QR symbol encoder.

Every error aborts the build; nothing is retried or partially recovered.
"""


class QRCodeError(Exception):
    """Base exception for all encoder errors."""

    pass


#==============================================================================
# INPUT ERRORS
#==============================================================================

class EmptyInputError(QRCodeError, ValueError):
    """No data was given to encode."""

    pass


class EncodingModeError(QRCodeError, ValueError):
    """Data cannot be represented in the requested mode."""

    def __init__(self, data, mode, suggested):
        self.data = data
        self.mode = mode
        self.suggested = suggested
        super().__init__(
            f'"{data}" cannot be encoded with mode {mode}. '
            f"Suggested mode is: {suggested}"
        )


class InvalidCharacterError(QRCodeError, ValueError):
    """A character falls outside the enabled character set."""

    pass


#==============================================================================
# CAPACITY ERRORS
#==============================================================================

class DataOverflowError(QRCodeError):
    """No symbol version can hold the data at the requested level."""

    pass


class VersionTooSmallError(DataOverflowError):
    """An explicitly requested version is below the minimum needed."""

    def __init__(self, version: int, minimum: int):
        self.version = version
        self.minimum = minimum
        super().__init__(
            f"The chosen QR Code version ({version}) cannot contain this amount "
            f"of data. Minimum version required to store current data is: {minimum}."
        )


#==============================================================================
# CONFIGURATION ERRORS
#==============================================================================

class FieldError(QRCodeError, ArithmeticError):
    """Degenerate GF(256) operation, e.g. log(0)."""

    pass


class EncoderNotInitializedError(QRCodeError):
    """Reed-Solomon encoder used before a degree was set."""

    pass


class InvalidVersionError(QRCodeError, ValueError):
    pass


class InvalidLevelError(QRCodeError, ValueError):
    pass


class InvalidMaskError(QRCodeError, ValueError):
    pass


class FormatInfoError(QRCodeError, ValueError):
    """A 15-bit format word failed its BCH check."""

    pass


class RenderError(QRCodeError, ValueError):
    """Bad renderer options, such as an unparseable color."""

    pass
