"""
FUSION: composing optics in series

fuse(*optics) gives the cheapest optic equivalent to applying its
arguments in series:
- all plain Lenses: one Lens over the concatenated path
- otherwise: an OpticChain, which feeds the subject to the rightmost
  optic first and each result to the optic on its left
"""

from typing import Any, Callable, List, Sequence
import logging

from .errors import OpticError
from .lens import Lens
from .maybe import NOTHING, Just, Maybe
from .multifocal import AbstractMultifocal
from .optic import MonofocalOptic, Optic, is_optic

logger = logging.getLogger(__name__)


class OpticChain(MonofocalOptic):
    """
    Optics applied right-to-left: optics[-1] gets the subject, optics[0]
    produces the result.

    fuse(Lens(0), multifocal([Lens('name')])).get({'name': 'Fred'}) == 'Fred'
    """

    def __init__(self, optics: Sequence[Optic]):
        optics = tuple(optics)
        for index, optic in enumerate(optics):
            if not is_optic(optic):
                raise OpticError(f"OpticChain element {index} is not an optic: {optic!r}")
        self.optics = optics

    def __repr__(self):
        return f"OpticChain({list(self.optics)!r})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.optics == other.optics

    def __hash__(self):
        return hash((type(self), self.optics))

    def present(self, subject: Any) -> bool:
        """Vacuously true for an empty chain"""
        return self.get_maybe(subject).is_just

    def get_maybe(self, subject: Any, *tail: Any) -> Maybe[Any]:
        current: Maybe[Any] = Just(subject)
        for optic in reversed(self.optics):
            current = optic.get_maybe(current.value)
            if not current.is_just:
                return NOTHING
        if tail:
            return current.value.get_maybe(*tail) if is_optic(current.value) else NOTHING
        return current

    def xform_in_clone_maybe(self, subject: Any,
                             fn: Callable[[Maybe[Any]], Maybe[Any]]) -> Any:
        """
        Clone subject, transforming the chain's final target.

        Intermediate values are read on the way in; if any is absent the
        subject is returned unchanged. On the way out each optic rebuilds
        its own input around its rewritten output.
        """
        return _xform_through(list(reversed(self.optics)), subject, fn)


def _xform_through(optics: List[Optic], subject: Any,
                   fn: Callable[[Maybe[Any]], Maybe[Any]]) -> Any:
    # optics is in application order
    if not optics:
        result = fn(Just(subject))
        return result.value if result.is_just else subject

    first, rest = optics[0], optics[1:]
    if not rest:
        return _xform_target(first, subject, fn)

    inner = first.get_maybe(subject)
    if not inner.is_just:
        return subject
    new_inner = _xform_through(rest, inner.value, fn)
    if new_inner is inner.value:
        return subject
    return first.set_in_clone(subject, new_inner)


def _xform_target(optic: Optic, subject: Any,
                  fn: Callable[[Maybe[Any]], Maybe[Any]]) -> Any:
    if not isinstance(optic, AbstractMultifocal):
        return optic.xform_in_clone_maybe(subject, fn)
    current = optic.get_maybe(subject)
    result = fn(current)
    if result.is_just and result.value is current.value:
        return subject
    new_aggregate = result.value if result.is_just else optic.empty_aggregate()
    return optic.set_in_clone(subject, new_aggregate)


def fuse(*optics: Optic) -> Optic:
    """
    Combine optics in series.

    When every argument is exactly Lens, the result is Lens.fuse of them
    (paths concatenated left to right). Otherwise the result is an
    OpticChain over the arguments as given.
    """
    if optics and all(type(optic) is Lens for optic in optics):
        return Lens.fuse(*optics)
    if len(optics) == 1:
        return optics[0]
    logger.debug("Fusing %d optics into a chain", len(optics))
    return OpticChain(optics)
