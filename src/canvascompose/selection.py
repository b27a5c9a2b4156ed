"""Selection cursor — at most one selected media id.

Holds an id only, never the item. An id whose item has been removed
resolves to no selection and is cleared on lookup.
"""

from .errors import NotFound


class Selection:
    def __init__(self):
        self._selected_id: str | None = None

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def select(self, item_id: str | None) -> None:
        self._selected_id = item_id

    def clear(self) -> None:
        self._selected_id = None

    def is_selected(self, item_id: str) -> bool:
        return self._selected_id is not None and self._selected_id == item_id

    def resolve(self, composition):
        """Return the selected item, or None (clearing a dangling id)."""
        if self._selected_id is None:
            return None
        try:
            return composition.get(self._selected_id)
        except NotFound:
            self._selected_id = None
            return None
