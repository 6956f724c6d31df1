"""In-memory rendering adapter."""

from collections import Counter, deque

from hystrixview.core.models import EntityIdentity, EntityView

DEFAULT_MAX_CALLS = 1000


class InMemoryRenderer:
    """In-memory implementation of RendererPort.

    Keeps the latest view per mounted card and a log of the most recent
    calls. Suitable for testing and for headless use where views are read
    back by other code.

    Args:
        max_calls: Number of calls kept in the log. Older calls are
            discarded first.
    """

    def __init__(self, max_calls: int = DEFAULT_MAX_CALLS) -> None:
        self.cards: dict[EntityIdentity, EntityView] = {}
        self.calls: deque[tuple[str, EntityIdentity]] = deque(maxlen=max_calls)
        self._mounts: Counter[EntityIdentity] = Counter()

    def mount(self, view: EntityView) -> None:
        """Create an empty card for a new entity."""
        if view.identity in self.cards:
            raise ValueError(f"card {view.identity.key!r} is already mounted")
        self.cards[view.identity] = view
        self._mounts[view.identity] += 1
        self.calls.append(("mount", view.identity))

    def update(self, view: EntityView) -> None:
        """Replace the view of a mounted card."""
        if view.identity not in self.cards:
            raise KeyError(f"card {view.identity.key!r} is not mounted")
        self.cards[view.identity] = view
        self.calls.append(("update", view.identity))

    def unmount(self, identity: EntityIdentity) -> None:
        """Remove a card."""
        self.cards.pop(identity, None)
        self.calls.append(("unmount", identity))

    def mount_count(self, identity: EntityIdentity) -> int:
        """Times a card was mounted, including calls dropped from the log."""
        return self._mounts[identity]
