"""Error taxonomy shared by the normalizer, the Gemini adapter and the try-on flow.

Every error carries a message that can be shown to the user as-is, and the
HTTP status the API answers with.
"""

from viavo.models import AppStep


class TryOnError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# Input errors: bad file, oversized file, missing data before an action.

class InputError(TryOnError):
    status_code = 400


class UnsupportedTypeError(InputError):
    pass


class SizeLimitError(InputError):
    status_code = 413


class InvalidInputError(InputError):
    pass


# Decode errors: the bytes arrived but could not become a usable image.

class DecodeError(TryOnError):
    status_code = 422


class UnsupportedFormatError(DecodeError):
    pass


class EmptyFrameError(DecodeError):
    pass


class CanvasError(DecodeError):
    pass


# Remote errors: the Gemini call went through but gave nothing usable.

class RemoteError(TryOnError):
    status_code = 502


class EmptyResponseError(RemoteError):
    pass


class SchemaError(RemoteError):
    pass


class SynthesisFailedError(RemoteError):
    pass


class PreconditionError(TryOnError):
    """Raised before any remote call when the session is not ready for an action."""

    status_code = 409

    def __init__(self, message: str, redirect_to: AppStep) -> None:
        super().__init__(message)
        self.redirect_to = redirect_to
