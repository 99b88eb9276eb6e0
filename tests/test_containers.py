"""
Tests for the container capability protocol

Tests cover:
1. Built-in capabilities (dict, list/tuple, mappings, dataclasses, objects)
2. Sparse sequences (HOLE semantics, negative indices)
3. Clone-impossibility errors
4. Registration of foreign container types
"""

import unittest
import sys
import os
from collections import OrderedDict, namedtuple
from dataclasses import dataclass, field
from types import MappingProxyType
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from natural_optics.containers import (
    SetKey, RemoveKey, PopLast,
    Container, ContainerCapability,
    capability_for, probe, clone_with, register_container,
    RECORD, SEQUENCE, KEY_VALUE_STORE, DATACLASS, ATTRIBUTE_RECORD, SCALAR,
    SELF_CAPABILITY,
)
from natural_optics.errors import UncloneableError
from natural_optics.maybe import HOLE, NOTHING, Just


Point = namedtuple('Point', ['x', 'y'])


@dataclass(frozen=True)
class Address:
    street: str
    city: str = "Bedrock"
    tags: list = field(default_factory=list)


class Settings:
    def __init__(self):
        self.theme = 'light'


class NeedsArgs:
    def __init__(self, value):
        self.value = value


class TestCapabilityDispatch(unittest.TestCase):
    """Test which capability handles which container"""

    def test_builtin_dispatch(self):
        """Test the capability chosen for built-in containers"""
        self.assertIs(capability_for({}), RECORD)
        self.assertIs(capability_for([]), SEQUENCE)
        self.assertIs(capability_for(()), SEQUENCE)
        self.assertIs(capability_for(Point(1, 2)), SEQUENCE)
        self.assertIs(capability_for(MappingProxyType({})), KEY_VALUE_STORE)
        self.assertIs(capability_for(Address('Main')), DATACLASS)
        self.assertIs(capability_for(Settings()), ATTRIBUTE_RECORD)

    def test_scalars(self):
        """Test that scalars have no slots"""
        for value in (None, 3, 2.5, "text", b"bytes"):
            self.assertIs(capability_for(value), SCALAR)
            self.assertIs(probe(value, 0), NOTHING)

    def test_scalar_not_cloneable(self):
        """Test that cloning a scalar names its type"""
        with self.assertRaises(UncloneableError) as ctx:
            clone_with(42, SetKey('a', 1))
        self.assertIs(ctx.exception.container_type, int)
        self.assertIn("int", str(ctx.exception))


class TestRecordCapability(unittest.TestCase):
    """Test dict records"""

    def test_probe(self):
        """Test presence is distinct from a None value"""
        self.assertEqual(probe({'a': None}, 'a'), Just(None))
        self.assertIs(probe({'a': 1}, 'b'), NOTHING)
        self.assertIs(probe({'a': 1}, ['unhashable']), NOTHING)

    def test_set_clones(self):
        """Test that setting clones and leaves the input alone"""
        original = {'a': 1, 'b': [1]}
        result = clone_with(original, SetKey('a', 2))
        self.assertEqual(result, {'a': 2, 'b': [1]})
        self.assertEqual(original, {'a': 1, 'b': [1]})
        self.assertIs(result['b'], original['b'])

    def test_remove(self):
        """Test that removal deletes the key outright"""
        self.assertEqual(clone_with({'a': 1, 'b': 2}, RemoveKey('a')), {'b': 2})

    def test_remove_missing_returns_same(self):
        """Test that removing an absent key returns the same object"""
        original = {'a': 1}
        self.assertIs(clone_with(original, RemoveKey('z')), original)

    def test_pop_last(self):
        """Test PopLast on a record drops the last inserted key"""
        self.assertEqual(clone_with({'a': 1, 'b': 2}, PopLast()), {'a': 1})

    def test_dict_subclass_keeps_type(self):
        """Test that OrderedDict clones stay OrderedDict"""
        result = clone_with(OrderedDict(a=1), SetKey('b', 2))
        self.assertIsInstance(result, OrderedDict)
        self.assertEqual(list(result.items()), [('a', 1), ('b', 2)])


class TestSequenceCapability(unittest.TestCase):
    """Test lists and tuples, including sparse holes"""

    def test_negative_index(self):
        """Test that negative indices count from the end"""
        self.assertEqual(probe([2, 3, 5], -1), Just(5))
        self.assertEqual(probe([2, 3, 5], -3), Just(2))
        self.assertIs(probe([2, 3, 5], -4), NOTHING)

    def test_non_index_keys(self):
        """Test that only integers (not bools or strings) address sequences"""
        self.assertIs(probe([1, 2], 'a'), NOTHING)
        self.assertIs(probe([1, 2], True), NOTHING)

    def test_set_past_end_pads_with_holes(self):
        """Test that setting beyond the end leaves holes"""
        result = clone_with([1], SetKey(3, 'x'))
        self.assertEqual(result, [1, HOLE, HOLE, 'x'])
        self.assertIs(probe(result, 1), NOTHING)

    def test_remove_last_shrinks(self):
        """Test that removing the final element shrinks the list"""
        self.assertEqual(clone_with([1, 2, 3], RemoveKey(2)), [1, 2])
        self.assertEqual(clone_with([1, 2, 3], RemoveKey(-1)), [1, 2])

    def test_remove_inner_leaves_hole(self):
        """Test that removing an earlier element leaves a hole"""
        result = clone_with([1, 2, 3], RemoveKey(0))
        self.assertEqual(len(result), 3)
        self.assertIs(result[0], HOLE)
        self.assertIs(probe(result, 0), NOTHING)

    def test_remove_missing_returns_same(self):
        """Test that removing a hole or out-of-range index is a no-op"""
        original = [1, HOLE, 3]
        self.assertIs(clone_with(original, RemoveKey(1)), original)
        self.assertIs(clone_with(original, RemoveKey(10)), original)

    def test_pop_last(self):
        """Test PopLast on a sequence"""
        self.assertEqual(clone_with([1, 2, 3], PopLast()), [1, 2])
        empty = []
        self.assertIs(clone_with(empty, PopLast()), empty)

    def test_tuple_and_namedtuple(self):
        """Test that tuples rebuild as their own type"""
        self.assertEqual(clone_with((1, 2), SetKey(0, 9)), (9, 2))
        moved = clone_with(Point(1, 2), SetKey(1, 5))
        self.assertIsInstance(moved, Point)
        self.assertEqual(moved, Point(1, 5))

    def test_string_key_not_cloneable(self):
        """Test that a non-integer key cannot set into a sequence"""
        with self.assertRaises(UncloneableError):
            clone_with([1], SetKey('a', 2))

    def test_negative_out_of_range(self):
        """Test that setting a negative index before the start is a no-op"""
        original = [1]
        self.assertIs(clone_with(original, SetKey(-3, 2)), original)
        self.assertEqual(original, [1])

    def test_namedtuple_that_cannot_shrink(self):
        """Test that a namedtuple refusing its new length is not cloneable"""
        with self.assertRaises(UncloneableError) as ctx:
            clone_with(Point(1, 2), PopLast())
        self.assertIs(ctx.exception.container_type, Point)
        with self.assertRaises(UncloneableError):
            clone_with(Point(1, 2), RemoveKey(1))


class TestOtherCapabilities(unittest.TestCase):
    """Test mappings, dataclasses and attribute records"""

    def test_read_only_mapping(self):
        """Test that a read-only mapping can be probed but not cloned"""
        view = MappingProxyType({'a': 1})
        self.assertEqual(probe(view, 'a'), Just(1))
        with self.assertRaises(UncloneableError):
            clone_with(view, SetKey('a', 2))

    def test_dataclass(self):
        """Test dataclass field access and replace"""
        address = Address('Cave Stone Rd')
        self.assertEqual(probe(address, 'city'), Just('Bedrock'))
        self.assertIs(probe(address, 'zip'), NOTHING)
        moved = clone_with(address, SetKey('city', 'Rockvegas'))
        self.assertEqual(moved, Address('Cave Stone Rd', 'Rockvegas'))
        self.assertIs(moved.tags, address.tags)

    def test_dataclass_field_removal(self):
        """Test that dataclass fields cannot be removed"""
        address = Address('Main')
        with self.assertRaises(UncloneableError):
            clone_with(address, RemoveKey('city'))
        self.assertIs(clone_with(address, RemoveKey('zip')), address)

    def test_attribute_record(self):
        """Test attribute objects clone through a zero-argument constructor"""
        settings = Settings()
        settings.theme = 'dark'
        result = clone_with(settings, SetKey('font', 'mono'))
        self.assertIsNot(result, settings)
        self.assertEqual(vars(result), {'theme': 'dark', 'font': 'mono'})
        self.assertEqual(vars(settings), {'theme': 'dark'})

    def test_attribute_record_needs_args(self):
        """Test the error for classes requiring constructor arguments"""
        with self.assertRaises(UncloneableError) as ctx:
            clone_with(NeedsArgs(1), SetKey('value', 2))
        self.assertIn("requires arguments for instantiation", str(ctx.exception))
        self.assertIs(ctx.exception.container_type, NeedsArgs)


class Bag(Container):
    """Container implementing the capability on itself"""

    def __init__(self, **items):
        self.items = items

    def probe(self, key):
        return Just(self.items[key]) if key in self.items else NOTHING

    def clone_with(self, change):
        items = dict(self.items)
        if isinstance(change, SetKey):
            items[change.key] = change.value
        elif isinstance(change, RemoveKey):
            items.pop(change.key, None)
        return Bag(**items)


class Registered:
    def __init__(self, data=None):
        self.data = data or {}


class RegisteredCapability(ContainerCapability):
    def probe(self, container, key):
        return Just(container.data[key]) if key in container.data else NOTHING

    def clone_with(self, container, change):
        data = dict(container.data)
        if isinstance(change, SetKey):
            data[change.key] = change.value
        return Registered(data)


class TestContainerExtension(unittest.TestCase):
    """Test foreign container types joining the protocol"""

    def test_self_capability(self):
        """Test a Container subclass handles itself"""
        bag = Bag(a=1)
        self.assertIs(capability_for(bag), SELF_CAPABILITY)
        self.assertEqual(probe(bag, 'a'), Just(1))
        self.assertEqual(clone_with(bag, SetKey('b', 2)).items, {'a': 1, 'b': 2})

    def test_register_is_idempotent(self):
        """Test that a registration is never overwritten"""
        first = RegisteredCapability()
        self.assertTrue(register_container(Registered, first))
        self.assertFalse(register_container(Registered, RegisteredCapability()))
        self.assertIs(capability_for(Registered()), first)

    def test_builtin_registration_kept(self):
        """Test that re-registering dict keeps the built-in capability"""
        self.assertFalse(register_container(dict, RegisteredCapability()))
        self.assertIs(capability_for({}), RECORD)


if __name__ == "__main__":
    unittest.main()
