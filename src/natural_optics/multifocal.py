"""
MULTIFOCAL OPTICS: several optics read and written as one aggregate

A multifocal built from a sequence of optics reads as a list (absent
members leave HOLE at their index); one built from a mapping of optics
reads as a dict (absent members' keys are omitted). Writing a whole
aggregate checks that members sharing a slot agree on its new state.
"""

from typing import Any, Callable, Dict, Iterable, List, Tuple, Union
from abc import abstractmethod
from collections.abc import Mapping, Sequence
import logging

from .containers import Change, Container, clone_with, probe
from .errors import MultifocalShapeError, StereoscopyError
from .maybe import HOLE, NOTHING, Just, Maybe, MultifocalJust
from .optic import MonofocalOptic, Optic, is_optic

logger = logging.getLogger(__name__)

XformPair = Tuple[Any, Callable[..., Any]]


class _LensCap(MonofocalOptic):
    """Optic with no target; stands in for non-optic values when chaining"""

    def get_maybe(self, subject, *tail):
        return NOTHING

    def xform_in_clone_maybe(self, subject, fn):
        return subject

    def __repr__(self):
        return 'LENS_CAP'


LENS_CAP = _LensCap()


def _same_value(a: Any, b: Any) -> bool:
    return a is b or bool(a == b)


# ============================================================================
# ABSTRACT MULTIFOCAL
# ============================================================================

class AbstractMultifocal(Optic, Container):
    """
    Base for multifocal (n-focal) optics.

    A multifocal is also a container of its member optics, so a Lens can
    read a member out of it or build an altered copy of it.
    """

    def __init__(self, lenses: Any):
        self.lenses = self._capture(lenses)
        for key, member in self._members():
            if not is_optic(member):
                raise MultifocalShapeError(
                    f"{type(self).__name__} member {key!r} is not an optic: {member!r}"
                )

    def __repr__(self):
        return f"{type(self).__name__}({self.lenses!r})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.lenses == other.lenses

    __hash__ = None

    @abstractmethod
    def _capture(self, lenses: Any) -> Any:
        pass

    @abstractmethod
    def _members(self) -> Iterable[Tuple[Any, Optic]]:
        pass

    @abstractmethod
    def _intents(self, aggregate: Any) -> List[Tuple[Any, Optic, Maybe[Any]]]:
        """(key, member, intended Maybe) for each member, from an aggregate value"""
        pass

    @abstractmethod
    def empty_aggregate(self) -> Any:
        """Aggregate value with every member absent"""
        pass

    def normalize_aggregate(self, aggregate: Any) -> Any:
        """Aggregate in the form get() would return it"""
        return self._aggregate_of(intent for _, _, intent in self._intents(aggregate))

    @abstractmethod
    def _aggregate_of(self, maybes: Iterable[Maybe[Any]]) -> Any:
        pass

    # ------------------------------------------------------------------------
    # container of member optics
    # ------------------------------------------------------------------------

    def probe(self, key: Any) -> Maybe[Any]:
        return probe(self.lenses, key)

    def clone_with(self, change: Change) -> 'AbstractMultifocal':
        return type(self)(clone_with(self.lenses, change))

    def member(self, key: Any) -> Maybe[Optic]:
        """Member optic at key in a Maybe"""
        return probe(self.lenses, key)

    # ------------------------------------------------------------------------
    # reading
    # ------------------------------------------------------------------------

    def present(self, subject: Any) -> List[Any]:
        """Indices/keys of the members present in subject"""
        return [key for key, member in self._members() if member.present(subject)]

    def get(self, subject: Any, *tail: Any) -> Any:
        return self.get_maybe(subject, *tail).value

    def get_maybe(self, subject: Any, *tail: Any) -> MultifocalJust:
        results = [member.get_maybe(subject) for _, member in self._members()]
        if tail:
            chained = [
                Just(result.value if is_optic(result.value) else LENS_CAP)
                if result.is_just else NOTHING
                for result in results
            ]
            return self._chained(chained).get_maybe(*tail)
        return MultifocalJust(self._aggregate_of(results))

    @abstractmethod
    def _chained(self, maybes: List[Maybe[Optic]]) -> 'AbstractMultifocal':
        pass

    # ------------------------------------------------------------------------
    # cloning
    # ------------------------------------------------------------------------

    def xform_in_clone(self, subject: Any, xform_pairs: Iterable[XformPair],
                       add_missing: Union[bool, Callable[[Any], bool]] = False) -> Any:
        """
        Apply each (member key, transform) pair in order, through that
        member's xform_in_clone.

        add_missing is a bool, or a function of the member key giving one.
        Keys naming no member are skipped.
        """
        options = add_missing if callable(add_missing) else (lambda key: add_missing)
        result = subject
        for key, xform in xform_pairs:
            member = self.member(key)
            if member.is_just:
                result = member.value.xform_in_clone(result, xform, add_missing=options(key))
        return result

    def xform_in_clone_maybe(self, subject: Any, xform_pairs: Iterable[XformPair]) -> Any:
        """
        Apply each (member key, Maybe transform) pair in order, through
        that member's xform_in_clone_maybe. Keys naming no member are skipped.
        """
        result = subject
        for key, xform in xform_pairs:
            member = self.member(key)
            if member.is_just:
                result = member.value.xform_in_clone_maybe(result, xform)
        return result

    def set_in_clone(self, subject: Any, new_value: Any) -> Any:
        """
        Clone subject so that get() on the clone gives new_value.

        Members are written in order. A member whose slot already holds its
        new state is not written again; a member that undoes the state an
        earlier member wrote raises StereoscopyError.
        """
        result = subject
        settled = []
        for key, member, intent in self._intents(new_value):
            intent = _member_intent(member, intent)
            if not _holds(member, result, intent):
                result = _apply_intent(member, result, intent)
                if not _holds(member, result, intent):
                    logger.debug("Multifocal member %r cannot take its new state", key)
                    continue
                for other_key, other, other_intent in settled:
                    if not _holds(other, result, other_intent):
                        raise StereoscopyError([other_key, key], [other, member])
            settled.append((key, member, intent))
        return result


def _member_intent(member: Optic, intent: Maybe[Any]) -> Maybe[Any]:
    if isinstance(member, AbstractMultifocal):
        if intent.is_just:
            return Just(member.normalize_aggregate(intent.value))
        return Just(member.empty_aggregate())
    return intent


def _holds(member: Optic, subject: Any, intent: Maybe[Any]) -> bool:
    current = member.get_maybe(subject)
    if current.is_just != intent.is_just:
        return False
    return not intent.is_just or _same_value(current.value, intent.value)


def _apply_intent(member: Optic, subject: Any, intent: Maybe[Any]) -> Any:
    if isinstance(member, AbstractMultifocal):
        return member.set_in_clone(subject, intent.value)
    return member.xform_in_clone_maybe(subject, lambda current: intent)


# ============================================================================
# SEQUENCE-SHAPED MULTIFOCAL
# ============================================================================

class SequenceMultifocal(AbstractMultifocal):
    """Multifocal whose aggregate is a list, one position per member"""

    def _capture(self, lenses):
        if isinstance(lenses, (Mapping, str, bytes)) or not isinstance(lenses, Sequence):
            raise MultifocalShapeError(
                f"SequenceMultifocal needs a sequence of optics, not {type(lenses).__name__}"
            )
        return tuple(lenses)

    def _members(self):
        # A HOLE left by removing a member reads as nothing
        return ((index, LENS_CAP if member is HOLE else member)
                for index, member in enumerate(self.lenses))

    def _aggregate_of(self, maybes):
        return [maybe.value if maybe.is_just else HOLE for maybe in maybes]

    def _chained(self, maybes):
        return SequenceMultifocal([maybe.value_or(LENS_CAP) for maybe in maybes])

    def empty_aggregate(self):
        return [HOLE] * len(self.lenses)

    def _intents(self, aggregate):
        if isinstance(aggregate, (Mapping, str, bytes)) or not isinstance(aggregate, Sequence):
            raise MultifocalShapeError(
                f"SequenceMultifocal aggregate must be a sequence, not {type(aggregate).__name__}"
            )
        intents = []
        for index, member in self._members():
            value = aggregate[index] if index < len(aggregate) else HOLE
            intents.append((index, member, NOTHING if value is HOLE else Just(value)))
        return intents


# ============================================================================
# RECORD-SHAPED MULTIFOCAL
# ============================================================================

class RecordMultifocal(AbstractMultifocal):
    """Multifocal whose aggregate is a dict keyed like its members"""

    def _capture(self, lenses):
        if not isinstance(lenses, Mapping):
            raise MultifocalShapeError(
                f"RecordMultifocal needs a mapping of optics, not {type(lenses).__name__}"
            )
        return dict(lenses)

    def _members(self):
        return self.lenses.items()

    def _aggregate_of(self, maybes):
        return {
            key: maybe.value
            for key, maybe in zip(self.lenses, maybes)
            if maybe.is_just
        }

    def _chained(self, maybes):
        return RecordMultifocal({
            key: maybe.value
            for key, maybe in zip(self.lenses, maybes)
            if maybe.is_just
        })

    def empty_aggregate(self):
        return {}

    def _intents(self, aggregate):
        if not isinstance(aggregate, Mapping):
            raise MultifocalShapeError(
                f"RecordMultifocal aggregate must be a mapping, not {type(aggregate).__name__}"
            )
        return [
            (key, member, Just(aggregate[key]) if key in aggregate else NOTHING)
            for key, member in self.lenses.items()
        ]


def multifocal(lenses: Union[Sequence[Optic], Dict[Any, Optic]]) -> AbstractMultifocal:
    """Build a SequenceMultifocal or RecordMultifocal to match the shape of lenses"""
    if isinstance(lenses, Mapping):
        return RecordMultifocal(lenses)
    return SequenceMultifocal(lenses)
