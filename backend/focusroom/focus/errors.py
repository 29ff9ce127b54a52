class FocusError(Exception):
    """Base class for focus session errors."""


class InvalidConfiguration(FocusError, ValueError):
    """A mode was entered with a duration that is zero or negative."""


class DoubleOpenPrompt(FocusError):
    """An alert prompt was opened while another one is still open."""


class StaleResponse(FocusError):
    """A response arrived for an alert prompt that is already closed."""
