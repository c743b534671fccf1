"""System base class for pipeline stages.

Systems are the "logic" layer of the pipeline. They operate on components
attached to entities, reading required components and producing new ones.

Example:
    >>> class MyStage(System):
    ...     def required_components(self):
    ...         return [RawSource]
    ...     def produced_components(self):
    ...         return [ResolvedEncoding]
    ...     def run(self, world, eids):
    ...         for eid in eids:
    ...             source = world.get_component(eid, RawSource)
    ...             world.add_component(eid, resolve_encoding(source))
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from getpixels.core.world import World


class System(ABC):
    """Base class for all pipeline stages.

    Systems declare:
    - required_components(): What inputs they need
    - produced_components(): What outputs they create
    - run(): The actual transformation logic
    """

    @abstractmethod
    def required_components(self) -> list[type]:
        """Return list of component types this system requires as input."""

    @abstractmethod
    def produced_components(self) -> list[type]:
        """Return list of component types this system produces as output."""

    @abstractmethod
    def run(self, world: World, eids: list[int]) -> None:
        """Execute system on given entities.

        Args:
            world: World instance with entities and components
            eids: List of entity IDs to process
        """

    def can_run(self, world: World, eid: int) -> bool:
        """Check if entity has all required components."""
        return all(world.has_component(eid, ct) for ct in self.required_components())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
