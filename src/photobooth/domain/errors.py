"""Error taxonomy shared by the booth and the server."""


class PhotoboothError(Exception):
    """Base class for photobooth errors."""


class DeviceUnavailable(PhotoboothError):
    """Camera permission or hardware failure."""


class CaptureFailure(PhotoboothError):
    """Drawing or encoding a frame failed mid-session."""


class PersistenceFailure(PhotoboothError):
    """Saving an image to the server failed."""


class PresentationFailure(PhotoboothError):
    """Rendering a QR code or share affordance failed."""


class NotFound(PhotoboothError):
    """Requested record does not exist."""


class ValidationFailure(PhotoboothError):
    """Request is missing required fields or carries malformed data."""


class InvalidDataUrl(ValidationFailure):
    """Stored payload is not a base64 image data URL."""


class StoreFailure(PhotoboothError):
    """Media store call failed."""

    def __init__(self, action: str, detail: str) -> None:
        super().__init__(action)
        self.action = action
        self.detail = detail
