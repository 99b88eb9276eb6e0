"""
NATURAL_OPTICS: Lenses and Optics for Nested Python Data

Presence-aware reads and minimal-clone updates over nested dicts, lists,
tuples, dataclasses and any container type that registers the capability
protocol.
"""

import logging

__version__ = "1.0.0"

from .maybe import (
    Maybe,
    Just,
    Nothing,
    NOTHING,
    MultifocalJust,
    HOLE,
    maybe_do,
    each_found,
)

from .errors import (
    OpticError,
    LensFusionError,
    MultifocalShapeError,
    UncloneableError,
    StereoscopyError,
)

from .containers import (
    SetKey,
    RemoveKey,
    PopLast,
    ContainerCapability,
    Container,
    register_container,
    capability_for,
    probe,
    clone_with,
)

from .custom_step import CustomStep

from .container_factory import (
    ContainerFactory,
    KeyTypeContainerFactory,
    PathContainerFactory,
    DEFAULT_FACTORY,
    default_container_for,
)

from .optic import (
    Optic,
    MonofocalOptic,
    is_optic,
)

from .lens import Lens

from .lens_factory import (
    LensFactory,
    FactoryLens,
)

from .multifocal import (
    AbstractMultifocal,
    SequenceMultifocal,
    RecordMultifocal,
    multifocal,
    LENS_CAP,
)

from .fusion import (
    OpticChain,
    fuse,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())


def lens(*keys):
    """Construct a Lens over keys"""
    return Lens(*keys)


__all__ = [
    # Maybe
    "Maybe",
    "Just",
    "Nothing",
    "NOTHING",
    "MultifocalJust",
    "HOLE",
    "maybe_do",
    "each_found",

    # Errors
    "OpticError",
    "LensFusionError",
    "MultifocalShapeError",
    "UncloneableError",
    "StereoscopyError",

    # Containers
    "SetKey",
    "RemoveKey",
    "PopLast",
    "ContainerCapability",
    "Container",
    "register_container",
    "capability_for",
    "probe",
    "clone_with",
    "CustomStep",
    "ContainerFactory",
    "KeyTypeContainerFactory",
    "PathContainerFactory",
    "DEFAULT_FACTORY",
    "default_container_for",

    # Optics
    "Optic",
    "MonofocalOptic",
    "is_optic",
    "Lens",
    "lens",
    "LensFactory",
    "FactoryLens",
    "AbstractMultifocal",
    "SequenceMultifocal",
    "RecordMultifocal",
    "multifocal",
    "LENS_CAP",
    "OpticChain",
    "fuse",
]
