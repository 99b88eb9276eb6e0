"""
LENS: access and minimal-change update along one path of keys

A Lens is an ordered tuple of steps. Each step is either a plain key (an
integer index or any other key) or a CustomStep. Operations resolve the
steps against the subject one Slot at a time:

- reads fold probe() across the slots, stopping at the first absence
- updates build a slot stack top-down (synthesizing missing containers),
  then clone bottom-up so that only containers on the path are copied
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple
import logging

from .containers import RemoveKey, SetKey, clone_with, probe
from .container_factory import default_container_for
from .custom_step import CustomStep
from .errors import LensFusionError, UncloneableError
from .maybe import NOTHING, Just, Maybe
from .optic import MonofocalOptic, _no_op, is_optic

logger = logging.getLogger(__name__)


# ============================================================================
# SLOTS (one step resolved against one container)
# ============================================================================

class Slot:
    """A plain key within a concrete container"""
    rebuildable = True

    def __init__(self, container: Any, key: Any):
        self.container = container
        self.key = key

    def get_maybe(self) -> Maybe[Any]:
        return probe(self.container, self.key)

    def clone_and_set(self, value: Any) -> Any:
        return clone_with(self.container, SetKey(self.key, value))

    def clone_omitting(self) -> Any:
        return clone_with(self.container, RemoveKey(self.key))


class CustomStepSlot:
    """A CustomStep within a concrete container"""

    def __init__(self, container: Any, step: CustomStep):
        self.container = container
        self.step = step

    @property
    def rebuildable(self) -> bool:
        return self.step.rebuildable

    def get_maybe(self) -> Maybe[Any]:
        if not self.step.readable:
            return NOTHING
        return self.step.probe(self.container)

    def clone_and_set(self, value: Any) -> Any:
        return self.step.rebuild(self.container, Just(value))

    def clone_omitting(self) -> Any:
        return self.step.rebuild(self.container, NOTHING)


def make_slot(container: Any, key: Any):
    if isinstance(key, CustomStep):
        return CustomStepSlot(container, key)
    return Slot(container, key)


# ============================================================================
# LENS
# ============================================================================

class Lens(MonofocalOptic):
    """
    Optic targeting the slot reached by following keys from the subject.

    Lens('answer', 1).get({'answer': [2, 3, 5]}) == 3
    """

    def __init__(self, *keys: Any):
        self.keys: Tuple[Any, ...] = tuple(keys)

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(map(repr, self.keys))})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.keys == other.keys

    def __hash__(self):
        return hash((type(self), self.keys))

    def get_maybe(self, subject: Any, *tail: Any) -> Maybe[Any]:
        current = subject
        for key in self.keys:
            maybe = make_slot(current, key).get_maybe()
            if not maybe.is_just:
                return NOTHING
            current = maybe.value
        if tail:
            return current.get_maybe(*tail) if is_optic(current) else NOTHING
        return Just(current)

    def set_in_clone(self, subject: Any, new_value: Any) -> Any:
        """
        Clone subject with new_value in this slot.

        Missing intermediate containers are constructed. Assigning the
        value the slot already holds (by identity) returns subject.
        """
        if not self.keys:
            return new_value
        stack = self._slot_stack(subject)
        if stack is None:
            return subject
        slots, current = stack
        if current.is_just and current.value is new_value:
            return subject
        return self._rebuild(subject, slots, lambda slot: slot.clone_and_set(new_value))

    def xform_in_clone(self, subject: Any, fn: Callable[[Any], Any],
                       add_missing: bool = False) -> Any:
        if not self.keys:
            return fn(subject)
        stack = self._slot_stack(subject, add_missing=add_missing)
        if stack is None:
            return subject
        slots, current = stack
        old_value = current.value_or(None)
        new_value = fn(old_value)
        if current.is_just and new_value is old_value:
            return subject
        return self._rebuild(subject, slots, lambda slot: slot.clone_and_set(new_value))

    def xform_in_clone_maybe(self, subject: Any,
                             fn: Callable[[Maybe[Any]], Maybe[Any]]) -> Any:
        if not self.keys:
            result = fn(Just(subject))
            return result.value if result.is_just else subject
        stack = self._slot_stack(subject)
        if stack is None:
            return subject
        slots, current = stack
        result = fn(current)

        if result.is_just:
            if current.is_just and result.value is current.value:
                return subject
            return self._rebuild(subject, slots, lambda slot: slot.clone_and_set(result.value))

        if not current.is_just:
            return subject
        return self._rebuild(subject, slots, lambda slot: slot.clone_omitting())

    def bound(self, subject: Any, or_throw: Any = None,
              fallback: Optional[Callable[..., Any]] = None) -> Callable[..., Any]:
        """
        The method named by the final key, bound to the object the rest
        of the path reaches in subject.

        Lens('name', 'upper').bound({'name': 'fred'})() == 'FRED'
        """
        method = None
        if self.keys and isinstance(self.keys[-1], str):
            owner = Lens(*self.keys[:-1]).get(subject)
            method = getattr(owner, self.keys[-1], None)
        if callable(method):
            return method
        if or_throw is not None:
            raise or_throw
        return fallback if fallback is not None else _no_op

    @staticmethod
    def fuse(*lenses: 'Lens') -> 'Lens':
        """Concatenate the paths of several Lenses (exactly Lens, no subclasses)"""
        offenders = [lens for lens in lenses if type(lens) is not Lens]
        if offenders:
            raise LensFusionError(offenders)
        return Lens(*(key for lens in lenses for key in lens.keys))

    # ------------------------------------------------------------------------
    # slot stack
    # ------------------------------------------------------------------------

    def _slot_stack(self, subject: Any, add_missing: bool = True
                    ) -> Optional[Tuple[List[Any], Maybe[Any]]]:
        """
        Resolve one slot per key, top-down.

        Returns the slots and the Maybe of the final slot, or None if the
        path cannot be rebuilt (a step that cannot rebuild or construct, or
        an absent slot when add_missing is off).
        """
        slots = []
        current = subject
        present = True
        for depth, key in enumerate(self.keys):
            slot = make_slot(current, key)
            if not slot.rebuildable:
                logger.debug("%r cannot rebuild at depth %d", self, depth)
                return None
            slots.append(slot)
            maybe = slot.get_maybe()
            if maybe.is_just:
                current = maybe.value
                continue

            present = False
            if not add_missing:
                return None
            if depth + 1 < len(self.keys):
                constructed = self._construct_for(depth + 1)
                if not constructed.is_just:
                    logger.debug("%r cannot construct a container at depth %d", self, depth + 1)
                    return None
                current = constructed.value
        return slots, (Just(current) if present else NOTHING)

    def _rebuild(self, subject: Any, slots: Sequence[Any],
                 clone_last: Callable[[Any], Any]) -> Any:
        """
        Clone the innermost container with clone_last, then each enclosing
        container around it, ending at the root.

        If clone_last leaves the innermost container as it was, subject is
        returned. An UncloneableError gets the key path down to the
        container that failed.
        """
        depth = len(slots) - 1
        try:
            rebuilt = clone_last(slots[depth])
            if rebuilt is slots[depth].container:
                logger.debug("%r left its target container unchanged", self)
                return subject
            for depth in range(len(slots) - 2, -1, -1):
                rebuilt = slots[depth].clone_and_set(rebuilt)
        except UncloneableError as error:
            error.at_key_path(self.keys[:depth + 1])
            raise
        return rebuilt

    def _construct_for(self, depth: int) -> Maybe[Any]:
        """Empty container to be indexed by the key at depth, if constructible"""
        key = self.keys[depth]
        if isinstance(key, CustomStep):
            return Just(key.construct_empty()) if key.constructible else NOTHING
        return Just(default_container_for(key))
