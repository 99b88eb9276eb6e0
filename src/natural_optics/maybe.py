"""
MAYBE MONAD: presence-aware values for optics

Every read in this package reports presence separately from the value:
- Just(v) means the slot exists and holds v (v may be None, 0, "", ...)
- NOTHING means the slot does not exist
- HOLE marks a sparse position inside a sequence
"""

from typing import Any, Callable, Generic, Iterator, Optional, Tuple, TypeVar
from abc import ABC, abstractmethod
from dataclasses import dataclass
from collections.abc import Mapping, Sequence

A = TypeVar('A')  # Wrapped value type
B = TypeVar('B')  # Mapped value type


# ============================================================================
# SPARSE SEQUENCE MARKER
# ============================================================================

class _Hole:
    """Marker for a missing element of a sequence"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'HOLE'

    def __reduce__(self):
        return (_Hole, ())


HOLE = _Hole()


# ============================================================================
# MAYBE (Nothing | Just)
# ============================================================================

class Maybe(ABC, Generic[A]):
    """
    Maybe monad M(A) = 1 + A.
    Presence is carried by the constructor, never by the wrapped value.
    """
    is_just = False
    multifocal = False

    @abstractmethod
    def map(self, f: Callable[[A], B]) -> 'Maybe[B]':
        """Functor map for Maybe"""
        pass

    @abstractmethod
    def bind(self, f: Callable[[A], 'Maybe[B]']) -> 'Maybe[B]':
        """Monad bind for Maybe"""
        pass

    @abstractmethod
    def value_or(self, default: Any = None) -> Any:
        """Unwrap, substituting default for Nothing"""
        pass

    @staticmethod
    def pure(value: A) -> 'Maybe[A]':
        """Monad return: lift a present value"""
        return Just(value)

    @staticmethod
    def nothing() -> 'Maybe[A]':
        """The absent value"""
        return NOTHING


class Nothing(Maybe[Any]):
    """The single absent value"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def value_or(self, default=None):
        return default

    def __bool__(self):
        return False

    def __repr__(self):
        return 'NOTHING'

    def __reduce__(self):
        return (Nothing, ())


NOTHING = Nothing()


@dataclass(frozen=True)
class Just(Maybe[A]):
    """A present value, possibly None or HOLE"""
    value: A
    is_just = True

    def map(self, f: Callable[[A], B]) -> 'Maybe[B]':
        return Just(f(self.value))

    def bind(self, f: Callable[[A], Maybe[B]]) -> Maybe[B]:
        return f(self.value)

    def value_or(self, default: Any = None) -> A:
        return self.value


@dataclass(frozen=True)
class MultifocalJust(Just[A]):
    """
    Aggregate result of a multifocal get_maybe.
    The aggregate is always present; absent members show up as HOLE
    (sequence form) or as omitted keys (record form).
    """
    multifocal = True


# ============================================================================
# HELPERS
# ============================================================================

def maybe_do(
    maybe: Maybe[A],
    then: Callable[[A], B],
    or_else: Optional[Callable[[], B]] = None
) -> Optional[B]:
    """Call then(value) for Just, or_else() for Nothing"""
    if maybe.is_just:
        return then(maybe.value)
    return or_else() if or_else is not None else None


def each_found(maybe: Maybe[Any]) -> Iterator[Tuple[Any, ...]]:
    """
    Iterate found values of a Maybe.

    A plain Just yields (value,); a MultifocalJust yields (value, index) or
    (value, key) for each member that was found; Nothing yields nothing.
    """
    if not maybe.is_just:
        return
    value = maybe.value
    if not isinstance(maybe, MultifocalJust):
        yield (value,)
        return

    if isinstance(value, Mapping):
        for key, member_value in value.items():
            yield (member_value, key)
    elif isinstance(value, Sequence):
        for index, member_value in enumerate(value):
            if member_value is not HOLE:
                yield (member_value, index)
    else:
        yield (value,)
