"""Error types raised by the Archetype core.

Every message is meant to be shown to the user as-is; the UI never rewrites
them.
"""


class GenerationError(Exception):
    """Base class for failures of a generation request."""

    pass


class ServiceError(GenerationError):
    """The outbound call failed (network, authentication, quota, bad response).

    The message is the one reported by the transport.
    """

    pass


class EmptyResultError(GenerationError):
    """The service answered but no part carried an image payload."""

    pass


class ReadError(Exception):
    """A user-selected file could not be read into an ImageAsset."""

    pass


class UnknownPresetError(LookupError):
    """A preset id does not exist in its catalog."""

    def __init__(self, catalog: str, option_id: str):
        self.catalog = catalog
        self.option_id = option_id
        super().__init__(f"Unknown {catalog} preset: {option_id}")
