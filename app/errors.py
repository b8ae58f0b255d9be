"""Error taxonomy shared by the orchestrator, its collaborators and the HTTP layer."""


class ImageTaskError(Exception):
    """Base class for every failure raised by the image task pipeline."""


class InvalidInputError(ImageTaskError):
    """Task parameters were missing or malformed; nothing was recorded."""


class ResizeError(ImageTaskError):
    """The resize engine rejected or could not process the image."""


class StoreError(ImageTaskError):
    """The blob store failed to persist the resized image."""


class PersistenceError(ImageTaskError):
    """The metadata store failed a read or a write."""
