from argparse import ArgumentParser
from pathlib import Path
import sys

from rnpods.details.context import load_podfile
from rnpods.details.tools.codegen import codegen_main
from rnpods.details.tools.declare import declare_main
from rnpods.details.tools.post_install import post_install_main
from rnpods.details.tools.resolve import resolve_main


def main(argv=None):
    COMMANDS = {
        "resolve": resolve_main,
        "declare": declare_main,
        "codegen": codegen_main,
        "post-install": post_install_main,
    }
    # parse common arguments...
    parser = ArgumentParser(prog="rnpods")
    parser.add_argument("command", choices=COMMANDS.keys())
    parser.add_argument(
        "--root", type=str, default=".", help="Directory holding the Podfile"
    )
    args, unknown_args = parser.parse_known_args(argv)
    podfile = load_podfile(Path(args.root).resolve())
    exit_code = COMMANDS[args.command](podfile=podfile, command_args=unknown_args)
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
