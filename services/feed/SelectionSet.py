from typing import Callable, Iterable


class SelectionSet:
    """
    Document ids selected for a batch action.

    Membership is restricted to documents currently rendered, which the owner
    reports through ``rendered_ids``. Selecting never touches pagination state.
    """

    def __init__(self, rendered_ids: Callable[[], set[int]]) -> None:
        self._rendered_ids = rendered_ids
        self._selected: set[int] = set()
        self._active = False

    def is_active(self) -> bool:
        return self._active

    @property
    def selected(self) -> frozenset[int]:
        return frozenset(self._selected)

    def __contains__(self, doc_id: int) -> bool:
        return doc_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def enter_selection_mode(self) -> None:
        self._active = True

    def exit_selection_mode(self) -> None:
        self._selected.clear()
        self._active = False

    def toggle(self, doc_id: int) -> bool:
        """Flip the selection state of one document.

        Args:
            doc_id (int): A rendered document id.

        Returns:
            bool: True if the document is selected afterwards.

        Raises:
            ValueError: If selection mode is off or the document is not rendered.
        """
        if not self._active:
            raise ValueError("Selection mode is not active")
        if doc_id in self._selected:
            self._selected.discard(doc_id)
            return False
        if doc_id not in self._rendered_ids():
            raise ValueError(f"Document {doc_id} is not rendered and cannot be selected")
        self._selected.add(doc_id)
        return True

    def select_all(self, visible_ids: Iterable[int]) -> int:
        """Select every given id that is currently rendered. Enters selection mode if needed.

        Returns:
            int: Number of selected documents afterwards.
        """
        self._active = True
        rendered = self._rendered_ids()
        self._selected.update(doc_id for doc_id in visible_ids if doc_id in rendered)
        return len(self._selected)

    def clear(self) -> None:
        self._selected.clear()

    def retain(self, rendered_ids: set[int]) -> None:
        """Drop members that are no longer rendered, e.g. after a restart or deletion."""
        self._selected &= rendered_ids
