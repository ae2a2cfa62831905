"""Entry-point scripts exposing node, npm and yarn from the bin directory.

Local scripts locate the install relative to their own directory so the
project tree can be moved; global scripts forward to an absolute path found
on ``PATH``.
"""

from __future__ import annotations

import logging
import os
import textwrap
from pathlib import Path
from typing import Callable, Dict, List, Optional

from constants import Constants
from .errors import FilesystemError

logger = logging.getLogger(__name__)

_LOCAL_SH_TEMPLATE = textwrap.dedent("""\
    #!/usr/bin/env sh
    NODE_DIR="$(cd "$(dirname "$0")" && pwd)/{path}"
    export PATH="$NODE_DIR/bin:$PATH"
    exec "$NODE_DIR/bin/{executable}" "$@"
""")

_GLOBAL_SH_TEMPLATE = textwrap.dedent("""\
    #!/usr/bin/env sh
    exec "{path}" "$@"
""")

_LOCAL_BAT_TEMPLATES: Dict[str, str] = {
    "node": '@"%~dp0{path}\\node.exe" %*\r\n',
    "npm": '@"%~dp0{path}\\node.exe" "%~dp0{path}\\node_modules\\npm\\bin\\npm-cli.js" %*\r\n',
    "yarnpkg": '@"%~dp0{path}\\bin\\yarn.cmd" %*\r\n',
}

_GLOBAL_BAT_TEMPLATE = '@"{path}" %*\r\n'

# Executable inside <install>/bin each local POSIX wrapper forwards to
_LOCAL_EXECUTABLES = {"node": "node", "npm": "npm", "yarnpkg": "yarn"}


def script_file_name(name: str, windows: bool) -> str:
    return f"{name}.bat" if windows else name


def render_script(name: str, resolved_path: str, is_local: bool, windows: bool) -> str:
    """Render the wrapper for ``name`` pointing at ``resolved_path``."""
    if windows:
        if is_local:
            return _LOCAL_BAT_TEMPLATES[name].format(path=resolved_path.replace("/", "\\"))
        return _GLOBAL_BAT_TEMPLATE.format(path=resolved_path)
    if is_local:
        return _LOCAL_SH_TEMPLATE.format(path=resolved_path, executable=_LOCAL_EXECUTABLES[name])
    return _GLOBAL_SH_TEMPLATE.format(path=resolved_path)


def write_entry_point_script(
    bin_dir: Path,
    name: str,
    resolved_path: str,
    is_local: bool,
    windows: bool = False,
) -> Path:
    """Write one wrapper into ``bin_dir`` and make it executable."""
    script = Path(bin_dir) / script_file_name(name, windows)
    content = render_script(name, resolved_path, is_local, windows)
    try:
        script.write_text(content, encoding="utf-8", newline="")
        script.chmod(0o755)
    except OSError as exc:
        raise FilesystemError(f"Unable to write entry point {script}: {exc}") from exc
    logger.debug("Wrote entry point %s -> %s", script, resolved_path)
    return script


def _relative_path(target_dir: Path, bin_dir: Path) -> str:
    rel = os.path.relpath(os.path.abspath(target_dir), os.path.abspath(bin_dir))
    return Path(rel).as_posix()


def _is_within(path: str, directory: Path) -> bool:
    base = os.path.abspath(directory)
    try:
        return os.path.commonpath([os.path.abspath(path), base]) == base
    except ValueError:
        # different drives on Windows
        return False


def create_bin_scripts(
    bin_dir: Path,
    target_dir: Path,
    is_local: bool,
    global_lookup: Callable[[str], Optional[str]],
    yarn_installed: bool = False,
    windows: bool = False,
) -> List[Path]:
    """Create the node, npm (and yarnpkg) wrappers.

    Args:
        bin_dir: Where wrappers are written.
        target_dir: Local Node.js install directory.
        is_local: Point wrappers at ``target_dir`` rather than the global tools.
        global_lookup: Resolves a tool name to its absolute global path.
        yarn_installed: Also expose Yarn from ``target_dir/yarn``.
        windows: Write ``.bat`` wrappers.

    Returns:
        Paths of the scripts actually written.
    """
    bin_dir = Path(bin_dir)
    try:
        bin_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Unable to create directory {bin_dir}") from exc

    entries = [("node", Path(target_dir)), ("npm", Path(target_dir))]
    if yarn_installed:
        entries.append(("yarnpkg", Path(target_dir) / Constants.YARN_SUBDIR))

    written: List[Path] = []
    for name, directory in entries:
        if is_local:
            resolved = _relative_path(directory, bin_dir)
        else:
            resolved = global_lookup(name)
            if not resolved:
                logger.warning("No global %s found; skipping entry point", name)
                continue
            if _is_within(resolved, bin_dir):
                # Our own wrapper from a previous local install
                continue
        written.append(write_entry_point_script(bin_dir, name, resolved, is_local, windows))
    return written


def remove_bin_scripts(bin_dir: Path) -> List[Path]:
    """Delete every wrapper this installer may have written."""
    removed: List[Path] = []
    for name in Constants.ENTRY_POINT_NAMES:
        for windows in (False, True):
            script = Path(bin_dir) / script_file_name(name, windows)
            if script.exists():
                script.unlink()
                removed.append(script)
    return removed
