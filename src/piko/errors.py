"""Exception hierarchy for Piko."""


class PikoError(Exception):
    """Base class for all Piko errors."""


class ParseFailure(PikoError):
    """Time or command text could not be understood."""


class MessageFrozenError(PikoError):
    """Raised when appending to a message that has finished streaming."""


class GenerationError(PikoError):
    """The text generation backend is unavailable or failed mid-stream."""


class ReminderError(PikoError):
    """Base class for reminder backend failures."""


class PermissionDeniedError(ReminderError):
    """Access to the reminder backend was refused."""


class ReminderStorageError(ReminderError):
    """The reminder could not be saved."""


class ImageGenerationCancelled(PikoError):
    """The image request was dismissed before producing data."""


class StoreError(PikoError):
    """Conversation store lookup or write failed."""
