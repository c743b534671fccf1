"""Fluent pipeline for chaining systems over one entity."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from getpixels.core.system import System
    from getpixels.core.world import World

T = TypeVar("T", bound=BaseModel)


class Pipe:
    """Fluent pipeline builder with dependency checking.

    Systems are chained with `.to()` or the pipe operator `|` and run in
    order by `.out()`.

    Example:
        >>> pixels = (
        ...     world.pipe(entity)
        ...     | ResolveEncoding()
        ...     | DecodeFrames()
        ...     | NormalizeTensor()
        ... ).out(PixelTensor)
    """

    def __init__(self, world: "World", entity: int) -> None:
        self.world: Any = world
        self.entities = [entity]
        self.systems: list[Any] = []

    def to(self, system: "System") -> "Pipe":
        """Add system to pipeline."""
        self.systems.append(system)
        return self

    def __or__(self, system: "System") -> "Pipe":
        """Pipe operator, equivalent to `.to(system)`."""
        return self.to(system)

    def out(self, component_type: type[T]) -> T:
        """Execute pipeline and return component of specified type.

        Raises:
            RuntimeError: If any system cannot run (missing dependencies)
            KeyError: If entity doesn't have the requested component after execution
        """
        self.execute()
        return self.world.get_component(self.entities[0], component_type)  # type: ignore[no-any-return]

    def execute(self) -> None:
        """Run all systems in order.

        Exceptions raised by a system propagate unchanged; later systems
        do not run.

        Raises:
            RuntimeError: If any system cannot run on any entity
        """
        for system in self.systems:
            runnable = [
                eid for eid in self.entities if system.can_run(self.world, eid)
            ]

            if not runnable:
                required = [ct.__name__ for ct in system.required_components()]
                raise RuntimeError(
                    f"System {type(system).__name__} cannot run: "
                    f"entities missing required components {required}. "
                    f"Available entities: {self.entities}"
                )

            system.run(self.world, runnable)
