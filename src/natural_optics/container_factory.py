"""
CONTAINER FACTORIES: what to build when a clone needs a missing container

The default rule looks at the key that will index into the new container:
an integer key builds a list, anything else builds a dict.
"""

from typing import Any, Callable, Dict, Sequence, Tuple
from abc import ABC, abstractmethod

from .containers import is_index


def default_container_for(key: Any) -> Any:
    """Empty container to be indexed by key"""
    return [] if is_index(key) else {}


class ContainerFactory(ABC):
    """Strategy for constructing missing intermediate containers"""

    @abstractmethod
    def construct(self, keys: Sequence[Any]) -> Any:
        """
        Construct a missing container.

        Args:
            keys: The lens keys up to and including the one indexing
                into the missing container
        """
        pass


class KeyTypeContainerFactory(ContainerFactory):
    """
    Chooses the container type by the type of the indexing key: integer
    keys get sequence_type, all others get mapping_type.
    """

    def __init__(self, sequence_type: Callable[[], Any] = list,
                 mapping_type: Callable[[], Any] = dict):
        self.sequence_type = sequence_type
        self.mapping_type = mapping_type

    def construct(self, keys: Sequence[Any]) -> Any:
        key = keys[-1]
        return self.sequence_type() if is_index(key) else self.mapping_type()

    def __repr__(self):
        return (
            f"KeyTypeContainerFactory(sequence_type={self.sequence_type!r}, "
            f"mapping_type={self.mapping_type!r})"
        )


DEFAULT_FACTORY = KeyTypeContainerFactory()


class PathContainerFactory(ContainerFactory):
    """
    Chooses the container by the full key chain.

    overrides maps a tuple of keys (the chain up to and including the key
    indexing into the missing container) to a zero-argument constructor;
    chains without an override go to fallback.
    """

    def __init__(self, overrides: Dict[Tuple[Any, ...], Callable[[], Any]],
                 fallback: ContainerFactory = DEFAULT_FACTORY):
        self.overrides = dict(overrides)
        self.fallback = fallback

    def construct(self, keys: Sequence[Any]) -> Any:
        try:
            constructor = self.overrides.get(tuple(keys))
        except TypeError:
            constructor = None
        if constructor is not None:
            return constructor()
        return self.fallback.construct(keys)
