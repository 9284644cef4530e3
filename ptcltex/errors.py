class CodecError(Exception):
    """Base class for every failure raised by the particle texture codec."""


class UnrecognizedFormat(CodecError, ValueError):
    """The document is neither a Houdini point array nor an internal particle document."""


class DimensionMismatch(CodecError, ValueError):
    """Position and color textures (or their metadata) disagree on width/height."""


class EmptyInput(CodecError, ValueError):
    """Encode was called on a collection without points."""


class MissingMetadataWarning(UserWarning):
    """Decode ran without bounds metadata and fell back to the estimated bounds."""
