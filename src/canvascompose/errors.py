"""Error types raised by the composition core.

Both are local and recoverable. ValidationError means an edit was
rejected and the previous state kept; NotFound means an id no longer
exists in the composition.
"""


class CompositionError(Exception):
    """Base class for composition core errors."""


class ValidationError(CompositionError, ValueError):
    """Invalid geometry, time range or form input."""


class NotFound(CompositionError, LookupError):
    """Referenced media id is not in the composition."""

    def __init__(self, item_id: str):
        super().__init__(f"Unknown media id: '{item_id}'")
        self.item_id = item_id
