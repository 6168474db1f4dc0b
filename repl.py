import argparse
import logging
import sys

from malhaetda.parser import GRAMMARS
from malhaetda.session import Session
from malhaetda.shell import Shell


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Line-oriented evaluator for the malhaetda language")
    parser.add_argument("file", help="file to run line by line (if empty, goes to interactive mode)", nargs="?")
    parser.add_argument("--grammar", choices=sorted(GRAMMARS), default="symbolic", help="operator spelling")
    parser.add_argument("--no-color", action="store_true", help="do not colour diagnostics")
    parser.add_argument("--debug", action="store_true", help="log tokens and syntax trees to stderr")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    session = Session(grammar=GRAMMARS[args.grammar], color=not args.no_color)

    if args.file is not None:
        with open(args.file, encoding="utf-8") as f:
            session.run(f)
    else:
        try:
            Shell(session).cmdloop()
        except KeyboardInterrupt:
            print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
