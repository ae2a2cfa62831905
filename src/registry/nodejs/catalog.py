"""Node.js release catalog client."""

from __future__ import annotations

import logging
from typing import List

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from installer.errors import TransferError
from versioning.parser import normalize_version

logger = logging.getLogger(__name__)


def fetch_catalog(url: str = Constants.NODEJS_INDEX_URL) -> List[str]:
    """Fetch every published Node.js version from the dist index.

    Args:
        url: Location of the dist ``index.json``.

    Returns:
        Normalized version strings (no leading ``v``), in catalog order.

    Raises:
        TransferError: when the index cannot be fetched or is not a JSON list.
    """
    status_code, _, data = get_json(url, headers={"Accept": "application/json"})

    if status_code != 200:
        raise TransferError(f"Unable to fetch NodeJS versions from {safe_url(url)} (HTTP {status_code})")
    if not isinstance(data, list):
        raise TransferError(f"Unexpected NodeJS version index format at {safe_url(url)}")

    versions: List[str] = []
    for entry in data:
        raw = entry.get("version") if isinstance(entry, dict) else entry
        if isinstance(raw, str) and raw.strip():
            versions.append(normalize_version(raw))

    if is_debug_enabled(logger):
        logger.debug(
            "Fetched release catalog",
            extra=extra_context(
                event="catalog",
                component="catalog",
                action="fetch_catalog",
                outcome="success",
                count=len(versions),
                target=safe_url(url)
            )
        )
    return versions
