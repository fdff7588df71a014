import logging
import sys

from rich.pretty import pprint

from heron import *


class CopyOptions:
    source: str = Argument("Source", "the full path to the source file", required=True)
    target: str = Argument("Target", "the full path to the destination", required=True)
    overwrite: bool = Argument("Overwrite", "replace the destination when it exists", default=True)


class DeleteOptions:
    source: str = Argument("Source", "the full path to the file to delete", required=True)


class FileOptions:
    copy: CopyOptions = Command("Copy", "copy a file to a destination")
    delete: DeleteOptions = Command("Delete", "delete a file")
    fail_silently: bool = Argument("FailSilently", "do not report failures")
    verbose: bool = Argument("Verbose", "log parser diagnostics")


if __name__ == '__main__':
    options = FileOptions()
    with Parser(options, prog="files", colorful=True) as parser:
        if not parser.parse(sys.argv[1:]):
            sys.exit(2)
    if options.verbose:
        logging.basicConfig(level=logging.DEBUG)
        pprint(parser)
    pprint(vars(options), expand_all=True)
