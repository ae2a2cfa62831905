"""Archive extraction helpers.

Tarballs are unpacked with the system ``tar`` so symbolic links inside the
Node.js distribution survive; the leading ``node-vX.Y.Z-os-arch/`` directory
is stripped.
"""

from __future__ import annotations

import logging
import subprocess
import zipfile
from pathlib import Path

from .errors import ExtractionError

logger = logging.getLogger(__name__)


def extract_tar(archive: Path, target_dir: Path, strip_components: int = 1) -> int:
    """Extract ``archive`` into ``target_dir``.

    Returns:
        The tar exit status (always 0; non-zero raises).

    Raises:
        ExtractionError: when tar cannot be run or exits non-zero.
    """
    cmd = [
        "tar", "-xf", str(archive),
        "-C", str(target_dir),
        f"--strip-components={strip_components}",
    ]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise ExtractionError(f"Unable to run tar to extract {archive}: {exc}") from exc

    if result.returncode != 0:
        logger.debug("tar stderr: %s", result.stderr.strip())
        raise ExtractionError(
            f"An error occurred while untaring {archive} to {target_dir} (exit status {result.returncode})"
        )
    return result.returncode


def extract_zip(archive: Path, target_dir: Path) -> None:
    """Extract a zip archive as-is into ``target_dir``."""
    try:
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(target_dir)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ExtractionError(f"Unable to extract file {archive}") from exc
