"""Argument parsing functionality for markupdeps."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="markupdeps",
        description=(
            "markupdeps - keep an HTML file's script/link tags in sync with its package dependencies"
        ),
        add_help=True,
    )

    parser.add_argument("-p", "--package",
                        dest="PACKAGES",
                        help="Package reference to add, i.e: jquery@^2.0.0 (repeatable)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-i", "--input",
                        dest="INPUT",
                        help="HTML file to update (default: a blank skeleton)",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to write the updated HTML (default: stdout)",
                        action="store",
                        type=str)

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("-c", "--catalog",
                              dest="CATALOG",
                              help="YAML/JSON file with package definitions",
                              action="store",
                              type=str)
    source_group.add_argument("-r", "--registry",
                              dest="REGISTRY",
                              help="Base URL of a package metadata registry",
                              action="store",
                              type=str,
                              nargs="?",
                              const="")

    parser.add_argument("--scan",
                        dest="SCAN",
                        help="Adopt existing data-require tags from the input and re-sync them.",
                        action="store_true")
    parser.add_argument("--refresh",
                        dest="REFRESH",
                        help="Re-lay-out all package tags after resolution.",
                        action="store_true")
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="YAML configuration file",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="Registry request timeout in seconds",
                        action="store",
                        type=int)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
