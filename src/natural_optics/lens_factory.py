"""
LENS FACTORY: lenses sharing one container-construction policy
"""

from typing import Any

from .container_factory import DEFAULT_FACTORY, ContainerFactory
from .custom_step import CustomStep
from .lens import Lens
from .maybe import NOTHING, Just, Maybe


class FactoryLens(Lens):
    """Lens that builds missing containers through a ContainerFactory"""

    def __init__(self, *keys: Any, container_factory: ContainerFactory = DEFAULT_FACTORY):
        super().__init__(*keys)
        self.container_factory = container_factory

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.keys == other.keys and self.container_factory is other.container_factory

    def __hash__(self):
        return hash((type(self), self.keys, id(self.container_factory)))

    def _construct_for(self, depth: int) -> Maybe[Any]:
        key = self.keys[depth]
        if isinstance(key, CustomStep):
            return Just(key.construct_empty()) if key.constructible else NOTHING
        return Just(self.container_factory.construct(self.keys[:depth + 1]))


class LensFactory:
    """
    Mints lenses that construct missing containers with container_factory
    instead of the default list/dict rule.

    factory = LensFactory(container_factory=KeyTypeContainerFactory(mapping_type=OrderedDict))
    factory.lens('settings', 'theme').set_in_clone({}, 'dark')
    """

    def __init__(self, container_factory: ContainerFactory = DEFAULT_FACTORY):
        self.container_factory = container_factory

    def lens(self, *keys: Any) -> FactoryLens:
        """Construct a lens bound to this factory's container policy"""
        return FactoryLens(*keys, container_factory=self.container_factory)
