"""
CUSTOM STEP: a lens path element with caller-defined behavior
"""

from typing import Any, Callable, Optional
from dataclasses import dataclass

from .maybe import Maybe


@dataclass(frozen=True)
class CustomStep:
    """
    A step within a Lens whose access, update and construction are supplied
    by the caller instead of the container capability protocol.

    Args:
        probe: container -> Maybe of this step's slot in container
        rebuild: (container, Maybe) -> minimally modified clone of container
            such that probe(clone) returns the given Maybe
        construct_empty: () -> empty container of the type this step navigates

    Leaving out probe makes everything through this step absent. Leaving
    out rebuild makes mutations at or below this step no-ops. Leaving out
    construct_empty prevents building this step's container when missing.
    """
    probe: Optional[Callable[[Any], Maybe[Any]]] = None
    rebuild: Optional[Callable[[Any, Maybe[Any]], Any]] = None
    construct_empty: Optional[Callable[[], Any]] = None

    @property
    def readable(self) -> bool:
        return self.probe is not None

    @property
    def rebuildable(self) -> bool:
        return self.probe is not None and self.rebuild is not None

    @property
    def constructible(self) -> bool:
        return self.construct_empty is not None
