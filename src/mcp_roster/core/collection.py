"""
Local server collection management.

Owns the user-ordered list of server entries and the currently selected
entry. Collaborators (UI, storage) are notified through optional callbacks.
"""

from typing import Callable, Iterator, List, Optional, Sequence

from mcp_roster.core.exceptions import DuplicateServerError, ValidationError
from mcp_roster.core.models import ServerEntry, generate_server_id
from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)

EntryCallback = Callable[[ServerEntry], None]
OrderCallback = Callable[[List[ServerEntry]], None]
SelectCallback = Callable[[Optional[ServerEntry]], None]


def move_entry(order: Sequence[ServerEntry], from_index: int, to_index: int) -> List[ServerEntry]:
    """
    Return a new order with one entry moved, as a drag gesture would.

    Args:
        order: Current order
        from_index: Position of the dragged entry
        to_index: Position it is dropped at

    Returns:
        New list, the input is left untouched

    Raises:
        ValidationError: If either index is out of range
    """
    size = len(order)
    if not 0 <= from_index < size or not 0 <= to_index < size:
        raise ValidationError(
            f"Move {from_index} -> {to_index} out of range for {size} servers",
            error_code="INVALID_MOVE",
        )
    new_order = list(order)
    new_order.insert(to_index, new_order.pop(from_index))
    return new_order


class ServerCollectionManager:
    """Manages the ordered server collection."""

    def __init__(
        self,
        servers: Optional[Sequence[ServerEntry]] = None,
        on_add: Optional[EntryCallback] = None,
        on_update_order: Optional[OrderCallback] = None,
        on_select: Optional[SelectCallback] = None,
    ):
        """
        Initialize collection manager.

        Args:
            servers: Initial collection, usually loaded from storage
            on_add: Called with each added entry
            on_update_order: Called with the full list after a reorder
            on_select: Called when the selection changes
        """
        self._servers: List[ServerEntry] = []
        self._selected_id: Optional[str] = None
        self.on_add = on_add
        self.on_update_order = on_update_order
        self.on_select = on_select

        for server in servers or []:
            self._servers.append(self._with_id(server, self._servers))

    @property
    def servers(self) -> List[ServerEntry]:
        """Snapshot of the collection in display order."""
        return list(self._servers)

    @property
    def selected(self) -> Optional[ServerEntry]:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def __len__(self) -> int:
        return len(self._servers)

    def __iter__(self) -> Iterator[ServerEntry]:
        return iter(self.servers)

    def __contains__(self, server_id: object) -> bool:
        return any(s.id == server_id for s in self._servers)

    def get(self, server_id: str) -> Optional[ServerEntry]:
        for server in self._servers:
            if server.id == server_id:
                return server
        return None

    def add(self, entry: ServerEntry) -> str:
        """
        Append an entry to the collection.

        An entry without an id gets a freshly generated one.

        Returns:
            The id of the stored entry

        Raises:
            DuplicateServerError: If the id is already used
        """
        return self.add_many([entry])[0]

    def add_many(self, entries: Sequence[ServerEntry]) -> List[str]:
        """
        Append several entries as a single change.

        Every entry is checked before any is stored. If an on_add callback
        raises, the collection is restored to its previous contents and the
        error is re-raised.

        Returns:
            Ids of the stored entries, in order

        Raises:
            DuplicateServerError: If an id is already used, in the collection
                or earlier in the batch
        """
        previous = self._servers
        staged = list(previous)
        added = []
        for entry in entries:
            entry = self._with_id(entry, staged)
            staged.append(entry)
            added.append(entry)

        self._servers = staged
        try:
            for entry in added:
                logger.info(f"Added server '{entry.name}' ({entry.id})")
                if self.on_add:
                    self.on_add(entry)
        except Exception:
            self._servers = previous
            logger.warning(f"Rolled back {len(added)} added servers")
            raise
        return [entry.id for entry in added]

    def reorder(self, new_order: Sequence[ServerEntry]) -> None:
        """
        Replace the stored order.

        The previous order is restored if the on_update_order callback raises.

        Raises:
            ValidationError: If new_order is not a permutation of the collection
        """
        new_ids = [s.id for s in new_order]
        current_ids = [s.id for s in self._servers]
        if len(set(new_ids)) != len(new_ids) or sorted(new_ids) != sorted(current_ids):
            raise ValidationError(
                "New order must be a permutation of the existing servers",
                error_code="INVALID_ORDER",
                details={"expected": current_ids, "received": new_ids},
            )

        previous = self._servers
        self._servers = list(new_order)
        logger.debug(f"Reordered {len(self._servers)} servers")
        if self.on_update_order:
            try:
                self.on_update_order(self.servers)
            except Exception:
                self._servers = previous
                raise

    def move(self, from_index: int, to_index: int) -> None:
        """Move one entry, as the drag-and-drop list does."""
        self.reorder(move_entry(self._servers, from_index, to_index))

    def set_selected(self, entry: Optional[ServerEntry]) -> None:
        """Track the entry shown in the detail panel, or clear the selection."""
        self._selected_id = entry.id if entry is not None else None
        if self.on_select:
            self.on_select(entry)

    @staticmethod
    def _with_id(entry: ServerEntry, servers: Sequence[ServerEntry]) -> ServerEntry:
        if not entry.id:
            return entry.model_copy(update={"id": generate_server_id()})
        if any(s.id == entry.id for s in servers):
            raise DuplicateServerError(
                f"Server id '{entry.id}' already exists",
                server_ids=[entry.id],
                error_code="DUPLICATE_ID",
            )
        return entry
