"""NodeJS release catalog."""

from .catalog import fetch_catalog  # noqa: F401
