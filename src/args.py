"""Argument parsing functionality for the NodeJS installer."""

import argparse
from constants import Actions, Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="nodejs-installer",
        description=(
            "Install a project-local NodeJS (plus npm and Yarn) matching a version constraint"
        ),
        add_help=True,
    )

    parser.add_argument("action",
                        help="Action to perform (default: install)",
                        nargs="?",
                        default=Actions.INSTALL.value,
                        choices=Constants.ACTIONS)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("-V", "--version-constraint",
                        dest="VERSIONS",
                        help="NodeJS version constraint; repeat to OR several constraints",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--target-dir",
                        dest="TARGET_DIR",
                        help="Directory of the local NodeJS install",
                        action="store",
                        type=str)
    parser.add_argument("--bin-dir",
                        dest="BIN_DIR",
                        help="Directory receiving the node/npm/yarnpkg entry points",
                        action="store",
                        type=str)
    parser.add_argument("--vendor-dir",
                        dest="VENDOR_DIR",
                        help="Directory used for downloads",
                        action="store",
                        type=str)
    parser.add_argument("--force-local",
                        dest="FORCE_LOCAL",
                        help="Install locally even when a matching global NodeJS exists.",
                        action="store_true",
                        default=None)
    parser.add_argument("--npm-version",
                        dest="NPM_VERSION",
                        help="npm version constraint to install",
                        action="store",
                        type=str)
    parser.add_argument("--yarn-version",
                        dest="YARN_VERSION",
                        help="Exact Yarn version to install",
                        action="store",
                        type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
