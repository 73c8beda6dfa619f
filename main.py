import sys

from rich.pretty import pprint

from sedcli import *

devices = {}


def on_option(name, args):
    devices[name] = args
    return 0


def on_setup(entry, name, args):
    devices[entry, name] = args
    return 0


@command(
    "ownership", "O",
    options=[
        Option("device", "d", metavar="DEVICE", nargs=1, required=True, descr="Device node e.g. /dev/nvme0n1"),
    ],
    parse=on_option,
    privileged=True,
    descr="Take ownership of the drive",
)
def ownership():
    pprint(devices)
    return SedStatus.SUCCESS


@command(
    "setup", "S",
    namespace=Namespace("type", "t", entries=[
        Entry("opal", [
            Option("device", "d", metavar="DEVICE", nargs=1, required=True, descr="Device node e.g. /dev/nvme0n1"),
            Option("pin", "p", metavar="PIN", nargs=1, optional=True, descr="Admin PIN"),
        ], descr="TCG Opal drives"),
        Entry("ata", [
            Option("device", "d", metavar="DEVICE", nargs=1, required=True, descr="Device node e.g. /dev/sda"),
        ], descr="ATA security feature set"),
    ]),
    parse=on_setup,
    descr="Set up locking for a drive",
)
def setup():
    pprint(devices)
    return SedStatus.SUCCESS


@command("version", "V", descr="Print version")
def version():
    app.context.info("sedcli %s" % __version__)
    return 0


app = Application(
    "sedcli",
    "Self-Encrypting Drive Utility",
    "<command> [option...]",
    [ownership, setup, version],
    man="sedcli",
    notes=["The '<device>' must be a block device (e.g. /dev/nvme0n1)."],
    context=Context(audit=None),
)


if __name__ == '__main__':
    sys.exit(app.run())
