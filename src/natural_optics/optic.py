"""
OPTIC: the shared contract of lenses, multifocals and optic chains

Every optic supports:
- present(subject)
- get(subject, *tail) / get_maybe(subject, *tail)
- xform_in_clone(subject, ...) / xform_in_clone_maybe(subject, ...)
- set_in_clone(subject, new_value)

All *_in_clone operations are pure: the subject is never altered, untouched
branches are shared with the result, and an update that changes nothing
returns the subject itself.
"""

from typing import Any, Callable, Iterator, Optional
from abc import ABC, abstractmethod
from collections.abc import Iterable
import logging

from . import config
from .maybe import NOTHING, Just, Maybe

logger = logging.getLogger(__name__)


def is_optic(value: Any) -> bool:
    """Whether value implements the optic contract"""
    return isinstance(value, Optic)


def is_iterable(value: Any) -> bool:
    """Iterable, counting strings and bytes as scalars"""
    return isinstance(value, Iterable) and not isinstance(value, config.SCALAR_ITERABLE_TYPES)


def raise_noniterable(or_throw: Any, maybe: Maybe[Any]) -> None:
    """Raise or_throw (if given) for a present, non-iterable slot value"""
    if or_throw is None or not maybe.is_just:
        return
    if isinstance(or_throw, BaseException):
        or_throw.noniterable_value = maybe.value
    raise or_throw


def _no_op(*args, **kwargs):
    return None


# ============================================================================
# OPTIC (abstract)
# ============================================================================

class Optic(ABC):
    """Abstract base for all optics"""

    @abstractmethod
    def get_maybe(self, subject: Any, *tail: Any) -> Maybe[Any]:
        """
        Get presence and value of the target within subject.

        With tail, the target must itself be an optic; its get_maybe is
        applied to tail. Otherwise the result is NOTHING.
        """
        pass

    @abstractmethod
    def xform_in_clone_maybe(self, subject: Any, fn: Any) -> Any:
        """Clone subject, transforming or removing the target"""
        pass

    @abstractmethod
    def xform_in_clone(self, subject: Any, fn: Any, add_missing: Any = False) -> Any:
        """Clone subject with the target's value transformed"""
        pass

    @abstractmethod
    def set_in_clone(self, subject: Any, new_value: Any) -> Any:
        """Clone subject with new_value as the target's value"""
        pass

    def get(self, subject: Any, *tail: Any) -> Any:
        """
        Get the target's value within subject, or None if absent.

        With tail, get is chained: the target must be an optic, whose get
        is called with tail; any other target gives None.
        """
        value = self.get_maybe(subject).value_or(None)
        if tail:
            return value.get(*tail) if is_optic(value) else None
        return value

    def present(self, subject: Any) -> Any:
        """Test for the presence of the target in subject"""
        return self.get_maybe(subject).is_just

    def get_iterable(self, subject: Any, or_throw: Any = None) -> Any:
        """
        Get the target's value, guaranteed iterable.

        An absent target gives an empty list. A present but non-iterable
        value (strings included) raises or_throw if given, with its
        noniterable_value attribute set, and otherwise gives an empty list.
        """
        maybe = self.get_maybe(subject)
        if maybe.is_just and is_iterable(maybe.value):
            return maybe.value
        raise_noniterable(or_throw, maybe)
        return []

    def getting(self, subject: Any,
                then: Optional[Callable[[Any], Any]] = None,
                else_: Optional[Callable[[], Any]] = None) -> Any:
        """Evaluate then(value) if the target is present, else else_()"""
        maybe = self.get_maybe(subject)
        if maybe.is_just:
            return then(maybe.value) if then is not None else None
        return else_() if else_ is not None else None

    def if_found(self, subject: Any) -> Iterator[Any]:
        """Yield the target's value if present"""
        maybe = self.get_maybe(subject)
        if maybe.is_just:
            yield maybe.value

    def binding(self, method_name: str, on: Any, bind_now: bool = False,
                or_throw: Any = None,
                fallback: Optional[Callable[..., Any]] = None) -> Callable[..., Any]:
        """
        Method method_name of the target within on, as a callable.

        By default the target is looked up each time the result is called;
        with bind_now it is looked up once, here. When no such method
        exists, or_throw is raised, else fallback is used, else the call
        does nothing and returns None.
        """
        def look_up():
            owner = self.get(on)
            if not isinstance(method_name, str):
                return None
            method = getattr(owner, method_name, None)
            return method if callable(method) else None

        if bind_now:
            method = look_up()
            if method is not None:
                return method
            if or_throw is not None:
                raise or_throw
            return fallback if fallback is not None else _no_op

        def late_bound(*args, **kwargs):
            method = look_up()
            if method is not None:
                return method(*args, **kwargs)
            if or_throw is not None:
                raise or_throw
            if fallback is not None:
                return fallback(*args, **kwargs)
            return None

        return late_bound


# ============================================================================
# MONOFOCAL OPTIC (one target slot)
# ============================================================================

class MonofocalOptic(Optic):
    """
    Optic with a single target slot, whose xform_in_clone_maybe takes a
    function Maybe -> Maybe.
    """

    @abstractmethod
    def xform_in_clone_maybe(self, subject: Any,
                             fn: Callable[[Maybe[Any]], Maybe[Any]]) -> Any:
        """
        Clone subject, transforming or removing the target.

        fn gets the target in a Maybe (NOTHING when absent) and returns
        the Maybe the clone should hold: NOTHING removes the target.
        """
        pass

    def xform_in_clone(self, subject: Any, fn: Callable[[Any], Any],
                       add_missing: bool = False) -> Any:
        """
        Clone subject with fn applied to the target's value.

        An absent target is left absent and fn is not called, unless
        add_missing is set, in which case fn is called with None.
        """
        def xform(maybe):
            if maybe.is_just or add_missing:
                return Just(fn(maybe.value_or(None)))
            return NOTHING
        return self.xform_in_clone_maybe(subject, xform)

    def set_in_clone(self, subject: Any, new_value: Any) -> Any:
        return self.xform_in_clone_maybe(subject, lambda maybe: Just(new_value))

    def xform_iterable_in_clone(self, subject: Any, fn: Callable[[Any], Any],
                                or_throw: Any = None) -> Any:
        """
        Clone subject with fn applied to the target's iterable value.

        fn always gets an iterable: an empty list stands in for an absent
        or non-iterable target (unless or_throw is given and the target is
        present). A non-iterable result from fn is logged and replaced with
        an empty list.
        """
        def xform(maybe):
            if maybe.is_just and is_iterable(maybe.value):
                input_value = maybe.value
            else:
                raise_noniterable(or_throw, maybe)
                input_value = []
            result = fn(input_value)
            if not is_iterable(result):
                logger.warning(
                    "Noniterable result from fn of xform_iterable_in_clone; "
                    "substituting empty list",
                    extra={
                        "msg_id": config.ANOMALY_MSG_ID,
                        "optic": repr(self),
                        "input_type": type(input_value).__name__,
                        "result_type": type(result).__name__,
                    },
                    stack_info=config.TRACE_ANOMALIES,
                )
                return Just([])
            return Just(result)
        return self.xform_in_clone_maybe(subject, xform)
