"""Shared HTTP helpers used by the catalog and artifact downloads.

Encapsulates common request/timeout error handling so callers avoid
duplicating try/except blocks. Failures surface as ``TransferError`` so the
orchestrator can abort the run; the CLI maps them to an exit code.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from installer.errors import FilesystemError, TransferError

logger = logging.getLogger(__name__)


def _default_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    merged = {"User-Agent": Constants.USER_AGENT}
    if headers:
        merged.update(headers)
    return merged


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform a single GET request with timeout, with DEBUG traces.

    Transfers are never retried within a run.

    Raises:
        TransferError: when the request fails at the transport level.
    """
    safe_target = safe_url(url)

    with Timer() as t:
        try:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="http_client",
                        action="GET",
                        target=safe_target
                    )
                )

            response = requests.get(
                url,
                timeout=Constants.REQUEST_TIMEOUT,
                headers=_default_headers(headers),
                **kwargs
            )
        except requests.Timeout as exc:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP timeout",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        action="GET",
                        outcome="timeout",
                        target=safe_target
                    )
                )
            raise TransferError(
                f"Request to {safe_target} timed out after {Constants.REQUEST_TIMEOUT} seconds"
            ) from exc
        except requests.RequestException as exc:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request exception",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        action="GET",
                        outcome="request_exception",
                        target=safe_target
                    )
                )
            raise TransferError(f"Request to {safe_target} failed: {exc}") from exc

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response ok",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success",
                status_code=response.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target
            )
        )
    return response.status_code, dict(response.headers), response.text


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response with DEBUG traces.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)

    if status_code == 200 and text:
        try:
            parsed = json.loads(text)
            return status_code, response_headers, parsed
        except json.JSONDecodeError:
            if is_debug_enabled(logger):
                logger.debug(
                    "JSON decode error",
                    extra=extra_context(
                        event="parse",
                        component="http_client",
                        action="get_json",
                        outcome="json_decode_error",
                        status_code=status_code,
                        target=safe_url(url)
                    )
                )
            return status_code, response_headers, None

    return status_code, response_headers, None


def download_file(url: str, dest: Path) -> Path:
    """Stream ``url`` into ``dest``.

    Raises:
        TransferError: on timeouts, connection errors or a non-2xx status.
        FilesystemError: when ``dest`` cannot be written.
    """
    safe_target = safe_url(url)
    logger.info("  Downloading from %s", safe_target)
    with Timer() as t:
        try:
            with requests.get(
                url,
                stream=True,
                allow_redirects=True,
                timeout=Constants.REQUEST_TIMEOUT,
                headers=_default_headers(None),
            ) as response:
                response.raise_for_status()
                try:
                    with open(dest, "wb") as fh:
                        for chunk in response.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_BYTES):
                            if chunk:
                                fh.write(chunk)
                except OSError as exc:
                    raise FilesystemError(
                        f"{safe_target} could not be saved to {dest}, make sure the directory is writable"
                    ) from exc
        except requests.Timeout as exc:
            raise TransferError(
                f"Download of {safe_target} timed out after {Constants.REQUEST_TIMEOUT} seconds"
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError and HTTPError
            raise TransferError(f"Download of {safe_target} failed: {exc}") from exc

    if is_debug_enabled(logger):
        logger.debug(
            "Download complete",
            extra=extra_context(
                event="download",
                component="http_client",
                action="download_file",
                outcome="success",
                duration_ms=t.duration_ms(),
                target=safe_target,
                size_bytes=dest.stat().st_size
            )
        )
    return dest
