"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3
    COMPANION_ERROR = 4


class Actions(Enum):
    """Top-level actions supported by the CLI.

    Args:
        Enum (string): Action names accepted on the command line.
    """

    INSTALL = "install"
    UNINSTALL = "uninstall"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    NODEJS_DIST_URL = "https://nodejs.org/dist"
    NODEJS_INDEX_URL = "https://nodejs.org/dist/index.json"
    YARN_RELEASES_URL = "https://github.com/yarnpkg/yarn/releases/download"
    NPM_BOOTSTRAP_VERSION = "1.4.12"

    # Versions at and above this one use the per-architecture dist layout
    ARCH_LAYOUT_MIN_VERSION = "4.0.0"

    ACTIONS = [Actions.INSTALL.value, Actions.UNINSTALL.value]
    CONFIG_SECTION = "nodejs"
    DEFAULT_CONSTRAINT = "*"
    DEFAULT_VENDOR_DIR = "vendor"
    DEFAULT_BIN_DIR = "vendor/bin"
    DEFAULT_TARGET_SUBDIR = "nodejs/nodejs"
    YARN_SUBDIR = "yarn"
    LOCK_FILE_NAME = ".nodejs-installer.lock"

    ENV_LOG_LEVEL = "NODEJS_INSTALLER_LOG_LEVEL"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    DOWNLOAD_CHUNK_BYTES = 1 << 16
    USER_AGENT = "nodejs-installer/1.0"

    ENTRY_POINT_NAMES = ["node", "npm", "yarnpkg"]
