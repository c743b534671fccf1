"""World: per-call entity/component registry.

One World is built for every pipeline call and cleared when the call ends.
It holds:
- Entity creation (integer IDs)
- Component storage (type -> entity -> component mapping)
- The pixel Arena, provisioned once the image dimensions are known

Example:
    >>> world = World(max_arena_bytes=64 << 20)
    >>> eid = world.spawn_source(RawSource(data=png_bytes, kind="buffer"))
    >>> world.provision_arena(480 * 640 * 4)
    >>> world.clear()
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel

from getpixels.core.arena import Arena
from getpixels.errors import ExhaustedFrameAllocationError

logger = logging.getLogger(__name__)

Component = BaseModel

T = TypeVar("T", bound=Component)


class World:
    """Registry of entities, components and the pixel arena for one call.

    Attributes:
        max_arena_bytes: Upper bound accepted by provision_arena()
        metadata: Per-entity metadata dict
    """

    def __init__(self, max_arena_bytes: int = 1 << 30):
        """Create an empty World.

        Args:
            max_arena_bytes: Largest arena this World may provision
        """
        self.max_arena_bytes = max_arena_bytes
        self._arena: Arena | None = None
        self._next_eid = 0
        self._components: dict[type[Component], dict[int, Component]] = {}
        self.metadata: dict[int, dict[str, Any]] = {}

    @property
    def arena(self) -> Arena:
        """The provisioned pixel arena.

        Raises:
            RuntimeError: If provision_arena() has not been called
        """
        if self._arena is None:
            raise RuntimeError("Arena not provisioned; call provision_arena() first")
        return self._arena

    @property
    def has_arena(self) -> bool:
        return self._arena is not None

    def provision_arena(self, size_bytes: int) -> Arena:
        """Allocate the arena for this call.

        Args:
            size_bytes: Exact number of bytes the decode needs

        Returns:
            The new Arena

        Raises:
            RuntimeError: If the arena was already provisioned
            ExhaustedFrameAllocationError: If size_bytes exceeds max_arena_bytes
                or the buffer cannot be allocated
        """
        if self._arena is not None:
            raise RuntimeError("Arena already provisioned for this world")
        if size_bytes > self.max_arena_bytes:
            raise ExhaustedFrameAllocationError(
                f"Pixel buffer of {size_bytes} bytes exceeds limit of "
                f"{self.max_arena_bytes} bytes"
            )
        logger.debug("Provisioning arena of %d bytes", size_bytes)
        self._arena = Arena(size_bytes=size_bytes)
        return self._arena

    def new_entity(self) -> int:
        """Create a new entity and return its ID."""
        eid = self._next_eid
        self._next_eid += 1
        self.metadata[eid] = {}
        return eid

    def spawn_source(self, source: Component) -> int:
        """Create an entity carrying a RawSource component.

        Args:
            source: RawSource produced by the source resolver

        Returns:
            Entity ID with the source attached
        """
        from getpixels.components.source import RawSource

        if not isinstance(source, RawSource):
            raise TypeError(f"Expected RawSource, got {type(source).__name__}")

        eid = self.new_entity()
        self.add_component(eid, source)
        self.metadata[eid]["source_kind"] = source.kind
        self.metadata[eid]["source_bytes"] = len(source.data)
        return eid

    def clear(self) -> None:
        """Drop all entities, components and the arena.

        Arrays already handed out keep their own reference to the buffer;
        TensorRefs into the old arena become stale.
        """
        if self._arena is not None:
            self._arena.reset()
        self._arena = None
        self._next_eid = 0
        self._components.clear()
        self.metadata.clear()

    def add_component(self, eid: int, component: Component) -> None:
        """Attach a component to an entity.

        Raises:
            ValueError: If entity does not exist
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")

        comp_type = type(component)
        if comp_type not in self._components:
            self._components[comp_type] = {}

        self._components[comp_type][eid] = component

    def get_component(self, eid: int, comp_type: type[T]) -> T:
        """Retrieve a component from an entity.

        Raises:
            KeyError: If entity does not have the component
        """
        if comp_type not in self._components:
            raise KeyError(f"No entities have component type {comp_type.__name__}")
        if eid not in self._components[comp_type]:
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        return self._components[comp_type][eid]  # type: ignore

    def has_component(self, eid: int, comp_type: type[Component]) -> bool:
        """Check if entity has a specific component type."""
        return (
            comp_type in self._components
            and eid in self._components[comp_type]
        )

    def pipe(self, entity: int) -> Any:
        """Create a pipeline for the given entity.

        Example:
            >>> result = (
            ...     world.pipe(entity)
            ...     .to(ResolveEncoding())
            ...     .to(DecodeFrames())
            ...     .to(NormalizeTensor())
            ...     .out(PixelTensor)
            ... )
        """
        from getpixels.core.pipeline import Pipe

        return Pipe(world=self, entity=entity)

    def __repr__(self) -> str:
        return (
            f"World(entities={len(self.metadata)}, "
            f"component_types={len(self._components)}, arena={self._arena})"
        )
