"""
ERRORS: failures of optic composition and cloning

Absence of a slot is never an error. These exceptions signal programmer
error in how optics were composed, or data that cannot be cloned.
"""

from typing import Any, Optional, Sequence, Tuple


class OpticError(Exception):
    """Base class for errors raised by natural_optics"""


class LensFusionError(OpticError, TypeError):
    """Lens.fuse was given something other than exactly Lens instances"""

    def __init__(self, offenders: Sequence[Any]):
        self.offenders = tuple(offenders)
        names = ', '.join(type(o).__name__ for o in self.offenders)
        super().__init__(
            f"Expected all arguments to be exactly Lens (no derived classes); got {names}"
        )


class MultifocalShapeError(OpticError, TypeError):
    """A multifocal was built from, or given, a value of the wrong shape"""


class UncloneableError(OpticError, TypeError):
    """
    No capability exists for cloning a container of this type.

    When raised from a Lens, lens_keys holds the key path down to the
    container that could not be cloned.
    """

    def __init__(self, container_type: type, reason: Optional[str] = None):
        self.container_type = container_type
        self.lens_keys: Optional[Tuple[Any, ...]] = None
        message = (
            f"'{container_type.__name__}' is not cloneable; "
            f"register a container capability for it"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

    def at_key_path(self, lens_keys: Sequence[Any]) -> 'UncloneableError':
        """Record the key path where cloning failed (innermost path wins)"""
        if self.lens_keys is None:
            self.lens_keys = tuple(lens_keys)
            self.args = (f"{self.args[0]} at key path {list(self.lens_keys)!r}",)
        return self


class StereoscopyError(OpticError, ValueError):
    """
    Two members of a multifocal target the same slot and disagree on
    its new state, so the clone would hold a superposition of values.
    """

    def __init__(self, member_keys: Sequence[Any], optics: Sequence[Any] = ()):
        self.member_keys = tuple(member_keys)
        self.optics = tuple(optics)
        super().__init__(
            f"Multifocal members {list(self.member_keys)} disagree on the "
            f"state of a shared slot"
        )
