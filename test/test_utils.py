"""
Utils module behavioral tests (sentinel, coalescing, renaming, mirroring, ordinals).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

import argbind
from argbind.utils import Unset, UnsetType, coalesce, rename, mirror, ordinal


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalseyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self):
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(3, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass


class TestCoalesce(TestCase):

    def testReplacesOnlyUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):

    def testDirectForm(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename("nope", "name")
        with self.assertRaises(TypeError):
            rename(print, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 3)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def setUp(self):
        class Holder:
            names = mirror("names")
            values = mirror("values")

            def __init__(self):
                self._names = ("-o", "--output")
                self._values = {"--output": ["a"]}

        self.holder = Holder()

    def testExposesBackingField(self):
        self.assertEqual(self.holder.names, ("-o", "--output"))

    def testHandsOutCopies(self):
        self.holder.values["--output"].append("b")
        self.assertEqual(self.holder.values, {"--output": ["a"]})

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.names = ()

    def testRequiresString(self):
        with self.assertRaises(TypeError):
            mirror(3)


class TestOrdinal(TestCase):

    def testWords(self):
        self.assertEqual([ordinal(number) for number in range(1, 11)], [
            "first", "second", "third", "fourth", "fifth",
            "sixth", "seventh", "eighth", "ninth", "tenth",
        ])

    def testSuffixes(self):
        for number, expected in ((11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"),
                                 (22, "22nd"), (23, "23rd"), (24, "24th"), (111, "111th"), (101, "101st")):
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), expected)

    def testRejectsNonIntegers(self):
        for number in (True, 1.0, "1"):
            with self.subTest(number=number):
                with self.assertRaises(TypeError):
                    ordinal(number)


class TestPackage(TestCase):

    def testVersionMetadataAgrees(self):
        self.assertEqual(argbind.__version__, "%d.%d.%d" % argbind.version_info[:3])
        self.assertEqual(argbind.__author__, "The argbind authors")

    def testExportsOnlyOwnApi(self):
        self.assertNotIn("__path__", argbind.__all__)
        for name in argbind.__all__:
            with self.subTest(name=name):
                self.assertTrue(hasattr(argbind, name))


if __name__ == "__main__":
    unittest.main()
