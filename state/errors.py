"""
Error kinds raised by the sketchpad state engine.

Every error is a recoverable, user-surfaceable condition. Each carries one
human-readable message and a stable code for API responses.
"""


class SketchpadError(Exception):
    """Base class for all sketchpad state errors."""

    code = "sketchpad_error"
    default_message = "Operation failed."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class EmptyHistory(SketchpadError):
    code = "empty_history"
    default_message = "Nothing to undo or redo."


class CapacityExceeded(SketchpadError):
    code = "capacity_exceeded"
    default_message = "Frame limit reached. Clear frames before adding more."


class IndexOutOfRange(SketchpadError):
    code = "index_out_of_range"
    default_message = "Frame index is out of range."


class EmptySequence(SketchpadError):
    code = "empty_sequence"
    default_message = "No frames available to play. Please add at least one frame."


class EncodingFailure(SketchpadError):
    code = "encoding_failure"
    default_message = "Could not encode frames into an archive."


class CorruptArchive(SketchpadError):
    code = "corrupt_archive"
    default_message = "The file is not a valid animation archive."


class EmptyArchive(SketchpadError):
    code = "empty_archive"
    default_message = "The archive contains no frames."
