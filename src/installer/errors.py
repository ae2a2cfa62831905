"""Exceptions raised by the installer core and its collaborators."""


class NodeJsInstallerError(Exception):
    """Base class for every fatal installer error."""


class UnsupportedPlatformError(NodeJsInstallerError):
    """No Node.js distribution exists for the host OS/architecture."""


class InvalidConstraintError(NodeJsInstallerError):
    """A version constraint could not be parsed."""


class NoMatchingVersionError(NodeJsInstallerError):
    """No catalog release satisfies the requested constraint."""

    def __init__(self, constraint: str):
        super().__init__(f"No NodeJS version could be found for constraint '{constraint}'")
        self.constraint = constraint


class TransferError(NodeJsInstallerError):
    """Fetching the catalog or an artifact failed."""


class ExtractionError(NodeJsInstallerError):
    """The archive tool reported a failure."""


class FilesystemError(NodeJsInstallerError):
    """A target directory could not be created, written or locked."""


class CompanionToolError(NodeJsInstallerError):
    """Installing npm or yarn failed."""
