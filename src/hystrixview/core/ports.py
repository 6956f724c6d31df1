"""Port interfaces for rendering adapters.

The core computes view-models; drawing them (HTML, SVG, terminal) is left
to adapters implementing these protocols.
"""

from typing import Protocol, runtime_checkable

from hystrixview.core.models import EntityIdentity, EntityView


@runtime_checkable
class RendererPort(Protocol):
    """Port for rendering entity cards.

    Adapters receive frozen views and must not keep references to the
    configs that produced them.
    Examples: InMemoryRenderer.
    """

    def mount(self, view: EntityView) -> None:
        """Create the card scaffold for a newly observed entity."""
        ...

    def update(self, view: EntityView) -> None:
        """Redraw a mounted card with a fresh view."""
        ...

    def unmount(self, identity: EntityIdentity) -> None:
        """Remove a card and release its resources."""
        ...
