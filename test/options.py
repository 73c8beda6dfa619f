"""
Option/command model tests (construction, normalization, variants).

Scope
- Validate Option metadata: names, metavar, nargs, flags, labels.
- Validate Namespace/Entry tables and uniqueness rules.
- Validate Command variant selection, callbacks and the command() factory.
- Validate Application command tables.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API exported by the sedcli package.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sedcli import (
    ActionCommand,
    Application,
    Command,
    CommandKind,
    Entry,
    FlatCommand,
    Namespace,
    NamespaceCommand,
    Option,
    OptionFlag,
    command,
)


def _handle():
    return 0


class TestOption(TestCase):
    """Behavioral tests for Option descriptors."""

    def testDefaults(self):
        option = Option("device")
        self.assertEqual(option.long_name, "device")
        self.assertIsNone(option.short_name)
        self.assertIsNone(option.metavar)
        self.assertIsNone(option.descr)
        self.assertEqual(option.nargs, 0)
        self.assertIs(option.flags, OptionFlag.NONE)
        self.assertFalse(option.parametric)

    def testFlags(self):
        option = Option("device", "d", metavar="DEV", required=True, optional=True, hidden=True)
        self.assertEqual(option.flags, OptionFlag.REQUIRED | OptionFlag.OPTIONAL | OptionFlag.HIDDEN)
        self.assertTrue(option.parametric)

    def testNamesAreTrimmed(self):
        self.assertEqual(Option("  device ").long_name, "device")

    def testLongNameShape(self):
        for name in ("", "9lives", "-device", "--device", "dev ice"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    Option(name)
        with self.assertRaises(TypeError):
            Option(42)

    def testShortNameShape(self):
        for name in ("", "dd", "9", "-", "é"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    Option("device", name)
        with self.assertRaises(TypeError):
            Option("device", 1)

    def testNargsValidation(self):
        with self.assertRaises(ValueError):
            Option("device", nargs=-1)
        with self.assertRaises(TypeError):
            Option("device", nargs="1")
        with self.assertRaises(TypeError):
            Option("device", nargs=True)

    def testEmptyTextsRejected(self):
        with self.assertRaises(ValueError):
            Option("device", metavar="  ")
        with self.assertRaises(ValueError):
            Option("device", descr="")

    def testLabel(self):
        self.assertEqual(Option("device", "d").label(), "-d/--device")
        self.assertEqual(Option("device").label(), "--device")

    def testSynopsis(self):
        self.assertEqual(Option("force").synopsis(), "--force")
        self.assertEqual(Option("device", metavar="DEV").synopsis(), "--device <DEV>")
        self.assertEqual(Option("pin", metavar="PIN", optional=True).synopsis(), "--pin [<PIN>]")

    def testPropertiesAreReadOnly(self):
        option = Option("device")
        with self.assertRaises(AttributeError):
            option.long_name = "other"

    def testRepr(self):
        self.assertTrue(repr(Option("device", "d")).startswith("option(long_name='device', short_name='d'"))


class TestNamespace(TestCase):
    """Behavioral tests for Namespace and Entry."""

    def testEntryDuplicateLongNamesRejected(self):
        with self.assertRaises(ValueError):
            Entry("opal", [Option("device"), Option("device")])

    def testEntryDuplicateShortNamesRejected(self):
        with self.assertRaises(ValueError):
            Entry("opal", [Option("device", "d"), Option("debug", "d")])

    def testEntryRejectsNonOptions(self):
        with self.assertRaises(TypeError):
            Entry("opal", ["--device"])

    def testFind(self):
        opal = Entry("opal", [Option("device", "d")], descr="TCG Opal")
        namespace = Namespace("type", "t", entries=[opal, Entry("ata")])
        self.assertIs(namespace.find("opal"), opal)
        self.assertIsNone(namespace.find("Opal"))
        self.assertIsNone(namespace.find("op"))

    def testEntriesRequired(self):
        with self.assertRaises(TypeError):
            Namespace("type", "t", entries=[])

    def testDuplicateEntriesRejected(self):
        with self.assertRaises(ValueError):
            Namespace("type", "t", entries=[Entry("opal"), Entry("opal")])

    def testLabel(self):
        self.assertEqual(Namespace("type", "t", entries=[Entry("opal")]).label(), "--type (-t)")
        self.assertEqual(Namespace("type", entries=[Entry("opal")]).label(), "--type")


class TestCommand(TestCase):
    """Behavioral tests for Command variants and the command() factory."""

    def testFlatVariant(self):
        cmd = Command(_handle, "lock", "L", options=[Option("device", "d")], parse=lambda name, args: 0)
        self.assertIsInstance(cmd, FlatCommand)
        self.assertIs(cmd.kind, CommandKind.FLAT)
        self.assertEqual([o.long_name for o in cmd.options], ["device"])

    def testNamespaceVariant(self):
        cmd = Command(_handle, "setup", namespace=Namespace("type", "t", entries=[Entry("opal")]))
        self.assertIsInstance(cmd, NamespaceCommand)
        self.assertIs(cmd.kind, CommandKind.NAMESPACE)

    def testActionVariant(self):
        cmd = Command(_handle, "version", "V")
        self.assertIsInstance(cmd, ActionCommand)
        self.assertIs(cmd.kind, CommandKind.ACTION)
        self.assertIsNone(cmd.resolve(["sedcli", "--version"]))

    def testOptionsAndNamespaceAreExclusive(self):
        with self.assertRaises(TypeError):
            Command(_handle, "setup", options=[], namespace=Namespace("type", "t", entries=[Entry("opal")]))

    def testActionRejectsParse(self):
        with self.assertRaises(TypeError):
            Command(_handle, "version", parse=lambda name, args: 0)

    def testNamespaceMustBeNamespace(self):
        with self.assertRaises(TypeError):
            Command(_handle, "setup", namespace="type")

    def testCallbacksMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("handle", "lock")
        with self.assertRaises(TypeError):
            Command(_handle, "lock", configure=1)
        with self.assertRaises(TypeError):
            Command(_handle, "lock", help="text")

    def testCallDelegatesToHandle(self):
        self.assertEqual(Command(lambda: 7, "lock")(), 7)

    def testFactoryDirect(self):
        cmd = command(_handle, "lock", "L", descr="Lock")
        self.assertEqual(cmd.name, "lock")
        self.assertEqual(cmd.descr, "Lock")

    def testFactoryDecorator(self):
        @command("lock", "L", options=[Option("device", "d")], privileged=True)
        def lock():
            return 3

        self.assertIsInstance(lock, FlatCommand)
        self.assertTrue(lock.privileged)
        self.assertEqual(lock(), 3)

    def testFactoryDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            command("lock")("nope")

    def testLabel(self):
        self.assertEqual(command(_handle, "lock", "L").label(), "--lock (-L)")
        self.assertEqual(command(_handle, "lock").label(), "--lock")


class TestApplication(TestCase):
    """Behavioral tests for Application construction."""

    def testCommandsRequired(self):
        with self.assertRaises(TypeError):
            Application("sedcli", "title", "info", [])

    def testDuplicateCommandNamesRejected(self):
        with self.assertRaises(ValueError):
            Application("sedcli", "title", "info", [command(_handle, "lock"), command(_handle, "lock")])

    def testDuplicateCommandShortNamesRejected(self):
        with self.assertRaises(ValueError):
            Application("sedcli", "title", "info", [command(_handle, "lock", "L"), command(_handle, "list", "L")])

    def testNotesMustBeStrings(self):
        with self.assertRaises(TypeError):
            Application("sedcli", "title", "info", [command(_handle, "lock")], notes=[1])

    def testContextMustBeContext(self):
        with self.assertRaises(TypeError):
            Application("sedcli", "title", "info", [command(_handle, "lock")], context=object())


if __name__ == "__main__":
    unittest.main()
