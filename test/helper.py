"""
Help/usage synthesizer tests (global, command, namespace and custom help).

Scope
- Validate the exact plain layout of every help screen.
- Validate that hidden commands/options are skipped and custom renderers win.
- Validate that documented options parse back without "unrecognized option".
- Validate that styling only appears on colorful contexts.
- Validate Context construction checks and normalized fields.

Conventions
- Test method names follow CamelCase per project convention.
- Expected rows are spelled with printf-style widths to pin the column layout.
"""

from __future__ import annotations

import io
import re
import unittest
from unittest import TestCase

from rich.console import Console

from sedcli import Application, Context, Entry, Mode, Namespace, Option, command
from sedcli.helper import print_command_help, print_help
from sedcli.parser import SUCCESS
from sedcli.utils import Unset

NOTE = "The '<device>' must be a block device (e.g. /dev/nvme0n1)."


def _context(colorful=False):
    out = io.StringIO()
    err = io.StringIO()
    system = "truecolor" if colorful else None
    context = Context(
        console=Console(file=out, width=200, color_system=system, force_terminal=colorful),
        errors=Console(file=err, width=200, color_system=system, force_terminal=colorful),
        colorful=colorful,
        audit=None,
        syslogs=(),
        privileged=lambda: True,
    )
    return context, out, err


def _application(context, *, man="sedcli", helper=Unset):
    def handle():
        return 0

    def parse(*args):
        return 0

    return Application("sedcli", "Self-Encrypting Drive Utility", "<command> [option...]", [
        command(
            handle, "ownership", "O",
            options=[Option("device", "d", metavar="DEV", nargs=1, required=True, descr="Device node")],
            parse=parse,
            descr="Take ownership",
        ),
        command(
            handle, "lock", "L",
            options=[
                Option("device", "d", metavar="DEV", nargs=1, required=True, descr="Device node"),
                Option("pin", "p", metavar="PIN", nargs=1, optional=True, descr="Drive PIN"),
                Option("force", "f", descr="Skip confirmation"),
                Option("secret", "s", hidden=True, descr="Not shown"),
            ],
            parse=parse,
            descr="Lock the drive",
            long_descr="Lock the drive and forget the session key",
        ),
        command(
            handle, "setup", "S",
            namespace=Namespace("type", "t", entries=[
                Entry("opal", [Option("device", "d", metavar="DEV", nargs=1, required=True, descr="Device node")],
                      descr="TCG Opal drives"),
                Entry("ata", [Option("force", "f", descr="Skip confirmation")], descr="ATA security"),
            ]),
            parse=parse,
            descr="Set up a drive",
        ),
        command(handle, "plain", descr="No short name"),
        command(handle, "debug", "D", hidden=True, descr="Hidden command"),
        command(handle, "custom", "C", help=helper, descr="Custom help"),
        command(handle, "version", "V", descr="Print version"),
    ], man=man, notes=[NOTE], context=context)


class TestGlobalHelp(TestCase):
    """Behavioral tests for print_help()."""

    def testLayout(self):
        context, out, _ = _context()
        print_help(_application(context))
        expected = "".join([
            "Self-Encrypting Drive Utility\n",
            "\n",
            "Usage: sedcli <command> [option...]\n",
            "\n",
            NOTE + "\n",
            "\n",
            "Available commands:\n",
            "   %-4s--%-25s%s\n" % ("-O", "ownership", "Take ownership"),
            "   %-4s--%-25s%s\n" % ("-L", "lock", "Lock the drive"),
            "   %-4s--%-25s%s\n" % ("-S", "setup", "Set up a drive"),
            "   --%-25s%s\n" % ("plain", "No short name"),
            "   %-4s--%-25s%s\n" % ("-C", "custom", "Custom help"),
            "   %-4s--%-25s%s\n" % ("-V", "version", "Print version"),
            "\n",
            "See 'sedcli <command> --help' for more information on a specific command.\n",
            "e.g.\n",
            "   sedcli --ownership --help\n",
            "For more information, please refer to manpage (man sedcli).\n",
        ])
        self.assertEqual(out.getvalue(), expected)

    def testWithoutManpage(self):
        context, out, _ = _context()
        print_help(_application(context, man=Unset))
        self.assertTrue(out.getvalue().endswith("For more information, please refer to manpage.\n"))

    def testRuntimeHiddenCommandsSkipped(self):
        context, out, _ = _context()
        print_help(_application(context), hidden={"lock"})
        self.assertNotIn("--lock", out.getvalue())
        self.assertNotIn("--debug", out.getvalue())

    def testThroughRun(self):
        context, out, _ = _context()
        self.assertEqual(_application(context).run(["sedcli", "-H"]), SUCCESS)
        self.assertTrue(out.getvalue().startswith("Self-Encrypting Drive Utility\n\n"))


class TestCommandHelp(TestCase):
    """Behavioral tests for print_command_help()."""

    def testFlatLayout(self):
        context, out, _ = _context()
        app = _application(context)
        print_command_help(app, app.commands[1])
        expected = "".join([
            "Usage: sedcli --lock --device <DEV> [option...]\n",
            "\n",
            "   Lock the drive and forget the session key\n",
            "\n",
            "Options that are valid with --lock (-L) are:\n",
            "   %-4s%-38s%s\n" % ("-d", "--device <DEV>", "Device node"),
            "   %-4s%-38s%s\n" % ("-p", "--pin [<PIN>]", "Drive PIN"),
            "   %-4s--%-36s%s\n" % ("-f", "force", "Skip confirmation"),
        ])
        self.assertEqual(out.getvalue(), expected)

    def testAllMandatoryOmitsOptionMarker(self):
        context, out, _ = _context()
        app = _application(context)
        print_command_help(app, app.commands[0])
        self.assertTrue(out.getvalue().startswith("Usage: sedcli --ownership --device <DEV>\n\n   Take ownership\n\n"))

    def testActionLayout(self):
        context, out, _ = _context()
        app = _application(context)
        print_command_help(app, app.commands[-1])
        self.assertEqual(out.getvalue(), "Usage: sedcli --version\n\n   Print version\n\n")

    def testNamespaceLayout(self):
        context, out, _ = _context()
        app = _application(context)
        print_command_help(app, app.commands[2])
        expected = "".join([
            "Usage: sedcli --setup --type <NAME>\n",
            "\n",
            "   Set up a drive\n",
            "\n",
            "Valid values of NAME are:\n",
            "   opal - TCG Opal drives\n",
            "   ata - ATA security\n",
            "\n",
            "Options that are valid with --setup (-S) --type (-t) opal are:\n",
            "   %-4s%-38s%s\n" % ("-d", "--device <DEV>", "Device node"),
            "\n",
            "Options that are valid with --setup (-S) --type (-t) ata are:\n",
            "   %-4s--%-36s%s\n" % ("-f", "force", "Skip confirmation"),
        ])
        self.assertEqual(out.getvalue(), expected)

    def testCustomRenderer(self):
        seen = []

        def helper(app, cmd):
            seen.append((app.name, cmd.name))
            app.context.info("custom usage")

        context, out, _ = _context()
        app = _application(context, helper=helper)
        self.assertEqual(app.run(["sedcli", "--custom", "--help"]), SUCCESS)
        self.assertEqual(seen, [("sedcli", "custom")])
        self.assertEqual(out.getvalue(), "custom usage\n")

    def testHiddenCommandHelpPrintsNothing(self):
        context, out, _ = _context()
        self.assertEqual(_application(context).run(["sedcli", "--debug", "--help"]), SUCCESS)
        self.assertEqual(out.getvalue(), "")

    def testDocumentedOptionsParseBack(self):
        for index in (0, 1):
            context, out, err = _context()
            app = _application(context)
            cmd = app.commands[index]
            print_command_help(app, cmd)
            tokens = []
            for line in out.getvalue().splitlines():
                if not line.startswith("   -"):
                    continue
                found = re.search(r"(--[A-Za-z][\w-]*)( \[?<\w+>\]?)?", line)
                tokens.append(found.group(1))
                if found.group(2):
                    tokens.append("value")
            with self.subTest(command=cmd.name, tokens=tokens):
                self.assertTrue(tokens)
                app.run(["sedcli", "--" + cmd.name, *tokens])
                self.assertNotIn("Unrecognized option", err.getvalue())
                self.assertEqual(err.getvalue(), "")


class TestStyling(TestCase):
    """Behavioral tests for the colorful switch."""

    def testPlainHasNoEscapes(self):
        context, out, _ = _context()
        print_help(_application(context))
        self.assertNotIn("\x1b[", out.getvalue())

    def testColorfulHasEscapes(self):
        context, out, _ = _context(colorful=True)
        print_help(_application(context))
        self.assertIn("\x1b[", out.getvalue())

    def testStylesOverride(self):
        context = Context(colorful=True, styles={"title": "bold red"}, audit=None)
        self.assertEqual(context.style("title"), "bold red")
        self.assertEqual(Context(styles={"title": "bold red"}, audit=None).style("title"), "")


class TestContext(TestCase):
    """Behavioral tests for Context construction."""

    def testMalformedFieldsRejected(self):
        cases = [
            {"console": object()},
            {"styles": ["title"]},
            {"mode": "sedcli-kmip"},
            {"audit": 42},
            {"syslogs": "/var/log/syslog"},
            {"privileged": True},
            {"clock": 1.0},
            {"transport": 0},
        ]
        for fields in cases:
            with self.subTest(fields=fields):
                with self.assertRaises(TypeError):
                    Context(**fields)

    def testFieldsAreNormalized(self):
        context = Context(audit=None, syslogs=iter(["/var/log/messages"]), clock=lambda: 12.5)
        self.assertIsNone(context.audit)
        self.assertEqual(context.syslogs, ["/var/log/messages"])
        self.assertEqual(context.clock(), 12.5)
        self.assertIs(context.mode, Mode.STANDARD)
        self.assertEqual(context.transport(), 0)

    def testPropertiesAreReadOnly(self):
        context = Context(audit=None)
        with self.assertRaises(AttributeError):
            context.audit = "/tmp/sedcli.log"


if __name__ == "__main__":
    unittest.main()
