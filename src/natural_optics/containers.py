"""
CONTAINER CAPABILITY PROTOCOL: how optics read and clone containers

Every container an optic passes through is handled by a capability with two
operations:
- probe(container, key) -> Maybe[value]
- clone_with(container, change) -> container'   (the input is never mutated)

Built-in capabilities cover dict, list/tuple, other mappings, dataclass
instances and plain attribute objects. Foreign types join through
register_container(), keyed by type identity and dispatched along the MRO.
"""

from typing import Any, Optional, Union
from dataclasses import dataclass
from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping
from functools import singledispatch
import copy
import dataclasses

from .errors import UncloneableError
from .maybe import HOLE, NOTHING, Just, Maybe


# ============================================================================
# CHANGE DESCRIPTORS
# ============================================================================

@dataclass(frozen=True)
class SetKey:
    """Clone with key bound to value"""
    key: Any
    value: Any


@dataclass(frozen=True)
class RemoveKey:
    """Clone without key"""
    key: Any


@dataclass(frozen=True)
class PopLast:
    """Clone without the final element"""


Change = Union[SetKey, RemoveKey, PopLast]


def is_index(key: Any) -> bool:
    """Whether key addresses a sequence position"""
    return isinstance(key, int) and not isinstance(key, bool)


# ============================================================================
# CAPABILITY INTERFACES
# ============================================================================

class ContainerCapability(ABC):
    """Probe/clone operations for one kind of container"""

    @abstractmethod
    def probe(self, container: Any, key: Any) -> Maybe[Any]:
        """Get the slot at key in a Maybe"""
        pass

    @abstractmethod
    def clone_with(self, container: Any, change: Change) -> Any:
        """Return a clone of container with change applied"""
        pass


class Container(ABC):
    """
    Base for classes that implement the capability on themselves.
    Instances of subclasses are always handled by their own methods,
    whatever is registered for their type.
    """

    @abstractmethod
    def probe(self, key: Any) -> Maybe[Any]:
        pass

    @abstractmethod
    def clone_with(self, change: Change) -> Any:
        pass


class SelfCapability(ContainerCapability):
    """Delegates to a Container's own methods"""

    def probe(self, container, key):
        return container.probe(key)

    def clone_with(self, container, change):
        return container.clone_with(change)


# ============================================================================
# BUILT-IN CAPABILITIES
# ============================================================================

class KeyValueStoreCapability(ContainerCapability):
    """Mappings with arbitrary (hashable) keys"""

    def probe(self, container, key):
        try:
            if key in container:
                return Just(container[key])
        except TypeError:
            # Unhashable key: cannot be present
            pass
        return NOTHING

    def clone_with(self, container, change):
        if not isinstance(container, MutableMapping):
            raise UncloneableError(type(container), "mapping is read-only")

        if isinstance(change, SetKey):
            result = self._copy(container)
            result[change.key] = change.value
            return result

        if isinstance(change, RemoveKey):
            if not self.probe(container, change.key).is_just:
                return container
            result = self._copy(container)
            del result[change.key]
            return result

        if isinstance(change, PopLast):
            if not container:
                return container
            result = self._copy(container)
            del result[next(reversed(list(result.keys())))]
            return result

        raise TypeError(f"Unknown container change: {change!r}")

    def _copy(self, container):
        return copy.copy(container)


class RecordCapability(KeyValueStoreCapability):
    """Plain dict records"""

    def _copy(self, container):
        if type(container) is dict:
            return dict(container)
        return copy.copy(container)


class SequenceCapability(ContainerCapability):
    """
    Lists and tuples indexed by integer.

    Negative indices count from the end. Setting past the end pads with
    HOLE; removing the last element shrinks the sequence, removing any
    other element leaves a HOLE in its place. A negative index before the
    start addresses no slot, so setting it returns the container unchanged.
    """

    def normalize(self, container, key) -> Optional[int]:
        """Absolute index for key, or None if it cannot address container"""
        if not is_index(key):
            return None
        if key < 0:
            key += len(container)
            if key < 0:
                return None
        return key

    def probe(self, container, key):
        index = self.normalize(container, key)
        if index is None or index >= len(container):
            return NOTHING
        value = container[index]
        if value is HOLE:
            return NOTHING
        return Just(value)

    def clone_with(self, container, change):
        if isinstance(change, SetKey):
            if not is_index(change.key):
                raise UncloneableError(
                    type(container), f"sequence key must be an integer, not {change.key!r}"
                )
            index = self.normalize(container, change.key)
            if index is None:
                # Before the start: no slot to write
                return container
            items = list(container)
            if index >= len(items):
                items.extend([HOLE] * (index + 1 - len(items)))
            items[index] = change.value
            return self.rebuild(container, items)

        if isinstance(change, RemoveKey):
            index = self.normalize(container, change.key)
            if index is None or index >= len(container) or container[index] is HOLE:
                return container
            items = list(container)
            if index == len(items) - 1:
                del items[-1]
            else:
                items[index] = HOLE
            return self.rebuild(container, items)

        if isinstance(change, PopLast):
            if not container:
                return container
            return self.rebuild(container, list(container)[:-1])

        raise TypeError(f"Unknown container change: {change!r}")

    def rebuild(self, container, items):
        """New container of the same type holding items"""
        if type(container) is list:
            return items
        if isinstance(container, list):
            result = copy.copy(container)
            result[:] = items
            return result
        container_type = type(container)
        try:
            if hasattr(container_type, '_make'):
                return container_type._make(items)
            return container_type(items)
        except TypeError as error:
            raise UncloneableError(container_type, str(error)) from error


class DataclassCapability(ContainerCapability):
    """Dataclass instances, addressed by field name"""

    def probe(self, container, key):
        if isinstance(key, str) and key in self._field_names(container):
            return Just(getattr(container, key))
        return NOTHING

    def clone_with(self, container, change):
        if isinstance(change, SetKey):
            if change.key not in self._field_names(container, init_only=True):
                raise UncloneableError(
                    type(container), f"no init field named {change.key!r}"
                )
            return dataclasses.replace(container, **{change.key: change.value})

        if isinstance(change, RemoveKey):
            if not self.probe(container, change.key).is_just:
                return container
            raise UncloneableError(
                type(container), f"dataclass field {change.key!r} cannot be removed"
            )

        raise UncloneableError(type(container), "dataclasses have no last element")

    def _field_names(self, container, init_only=False):
        return {
            f.name for f in dataclasses.fields(container)
            if f.init or not init_only
        }


class AttributeRecordCapability(ContainerCapability):
    """
    Objects with a __dict__, addressed by instance attribute name.
    Cloning needs a zero-argument constructor.
    """

    def probe(self, container, key):
        if isinstance(key, str) and key in vars(container):
            return Just(vars(container)[key])
        return NOTHING

    def clone_with(self, container, change):
        if isinstance(change, RemoveKey) and not self.probe(container, change.key).is_just:
            return container
        if isinstance(change, PopLast):
            raise UncloneableError(type(container), "attribute records have no last element")
        if isinstance(change, SetKey) and not isinstance(change.key, str):
            raise UncloneableError(
                type(container), f"attribute name must be a string, not {change.key!r}"
            )

        container_type = type(container)
        try:
            result = container_type()
        except TypeError as error:
            raise UncloneableError(
                container_type, "requires arguments for instantiation"
            ) from error
        result.__dict__.update(vars(container))

        if isinstance(change, SetKey):
            result.__dict__[change.key] = change.value
        else:
            del result.__dict__[change.key]
        return result


class ScalarCapability(ContainerCapability):
    """Values with no slots (None, numbers, strings, ...)"""

    def probe(self, container, key):
        return NOTHING

    def clone_with(self, container, change):
        raise UncloneableError(type(container))


SELF_CAPABILITY = SelfCapability()
RECORD = RecordCapability()
SEQUENCE = SequenceCapability()
KEY_VALUE_STORE = KeyValueStoreCapability()
DATACLASS = DataclassCapability()
ATTRIBUTE_RECORD = AttributeRecordCapability()
SCALAR = ScalarCapability()


# ============================================================================
# REGISTRY
# ============================================================================

@singledispatch
def _registered_capability(container: Any) -> Optional[ContainerCapability]:
    return None


def register_container(container_type: type, capability: ContainerCapability) -> bool:
    """
    Register capability for container_type (and its subclasses).

    An existing registration for exactly container_type is kept; returns
    whether this call registered anything.
    """
    if container_type in _registered_capability.registry:
        return False
    _registered_capability.register(
        container_type,
        lambda container, _capability=capability: _capability
    )
    return True


def capability_for(container: Any) -> ContainerCapability:
    """Find the capability handling container"""
    if isinstance(container, Container):
        return SELF_CAPABILITY
    capability = _registered_capability(container)
    if capability is not None:
        return capability
    if dataclasses.is_dataclass(container) and not isinstance(container, type):
        return DATACLASS
    if hasattr(container, '__dict__'):
        return ATTRIBUTE_RECORD
    return SCALAR


def probe(container: Any, key: Any) -> Maybe[Any]:
    """Get the slot at key of container in a Maybe"""
    return capability_for(container).probe(container, key)


def clone_with(container: Any, change: Change) -> Any:
    """Clone container with change applied"""
    return capability_for(container).clone_with(container, change)


register_container(dict, RECORD)
register_container(list, SEQUENCE)
register_container(tuple, SEQUENCE)
register_container(Mapping, KEY_VALUE_STORE)
