"""NodeJS installer - project-local NodeJS, npm and Yarn provisioning

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from constants import Actions, Constants, ExitCodes
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from config import load_settings
from installer.errors import (
    CompanionToolError,
    ExtractionError,
    FilesystemError,
    NodeJsInstallerError,
    TransferError,
)
from installer.orchestrator import InstallOrchestrator

logger = logging.getLogger(__name__)


def exit_code_for(exc: NodeJsInstallerError) -> int:
    """Map an installer error to the process exit code."""
    if isinstance(exc, TransferError):
        return ExitCodes.CONNECTION_ERROR.value
    if isinstance(exc, (FilesystemError, ExtractionError)):
        return ExitCodes.FILE_ERROR.value
    if isinstance(exc, CompanionToolError):
        return ExitCodes.COMPANION_ERROR.value
    return ExitCodes.RESOLUTION_ERROR.value


def build_overrides(args):
    """Translate parsed CLI arguments into config-key overrides."""
    return {
        "version": list(args.VERSIONS) or None,
        "targetDir": args.TARGET_DIR,
        "binDir": args.BIN_DIR,
        "vendorDir": args.VENDOR_DIR,
        "forceLocal": args.FORCE_LOCAL,
        "npmVersion": args.NPM_VERSION,
        "yarnVersion": args.YARN_VERSION,
    }


def run(args) -> int:
    """Run the requested action and return the exit code."""
    try:
        settings = load_settings(args.CONFIG, build_overrides(args))
        orchestrator = InstallOrchestrator(settings)
        if args.action == Actions.UNINSTALL.value:
            orchestrator.uninstall()
        else:
            outcome = orchestrator.run()
            if is_debug_enabled(logger):
                logger.debug(
                    "Run finished",
                    extra=extra_context(
                        event="function_exit",
                        component="cli",
                        action="run",
                        outcome=outcome.decision.kind.value,
                        version=outcome.decision.version
                    )
                )
    except NodeJsInstallerError as exc:
        logger.error("%s", exc)
        return exit_code_for(exc)
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(log_file=args.LOG_FILE, quiet=args.QUIET)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
