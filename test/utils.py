"""
Tests for the internal helpers (Unset sentinel, coalesce, typename, IntrospectableType).
"""
import copy
import unittest
from unittest import TestCase

from heron.utils import *


class Sample(metaclass=IntrospectableType):
    __introspectable__ = ("name", "items")

    def __init__(self, name, items):
        self._name = name
        self._items = items


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsyAndRepr(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        self.assertNotEqual(Unset, None)

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", Unset | str)
        self.assertNotIsInstance(5, str | Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):
                pass

    def testCopyPreservesIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)


class TestHelpers(TestCase):
    """Behavioral tests for coalesce() and typename()."""

    def testCoalesce(self):
        self.assertEqual(coalesce("name", "fallback"), "name")
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertIsNone(coalesce(Unset))

    def testTypename(self):
        self.assertEqual(typename("BasicOptions"), "basic-options")
        self.assertEqual(typename("Parser"), "parser")
        with self.assertRaises(TypeError):
            typename(5)


class TestIntrospectableType(TestCase):
    """Behavioral tests for the IntrospectableType metaclass."""

    def testTypenameAttribute(self):
        self.assertEqual(Sample.__typename__, "sample")

    def testMirroredPropertiesAreReadOnly(self):
        sample = Sample("a", ["x"])
        self.assertEqual(sample.name, "a")
        with self.assertRaises(AttributeError):
            sample.name = "b"

    def testMirroredContainersAreCopies(self):
        items = ["x"]
        sample = Sample("a", items)
        self.assertEqual(sample.items, ("x",))
        items.append("y")
        self.assertEqual(sample.items, ("x", "y"))

    def testRepr(self):
        self.assertEqual(repr(Sample("a", [])), "sample(name='a', items=())")
        self.assertEqual(list(Sample("a", []).__rich_repr__()), [("name", "a"), ("items", ())])


if __name__ == '__main__':
    # Allow running this test module directly: `python -m pytest` or `python utils.py`.
    unittest.main()
