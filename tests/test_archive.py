"""Tests for archive extraction."""

import io
import shutil
import subprocess
import tarfile
import zipfile
from unittest.mock import patch

import pytest

from installer.archive import extract_tar, extract_zip
from installer.errors import ExtractionError


def make_tarball(path, top="node-v6.0.0-linux-x64"):
    with tarfile.open(path, "w:gz") as tar:
        data = b"#!/bin/sh\n"
        info = tarfile.TarInfo(f"{top}/bin/node")
        info.size = len(data)
        tar.addfile(info, io.BytesIO(data))


class TestExtractTar:
    """System tar invocation."""

    @pytest.mark.skipif(shutil.which("tar") is None, reason="tar not available")
    def test_strips_top_directory(self, tmp_path):
        archive = tmp_path / "node.tar.gz"
        make_tarball(archive)
        target = tmp_path / "target"
        target.mkdir()

        assert extract_tar(archive, target) == 0
        assert (target / "bin" / "node").read_bytes() == b"#!/bin/sh\n"

    @patch('installer.archive.subprocess.run')
    def test_command_line(self, mock_run, tmp_path):
        mock_run.return_value = subprocess.CompletedProcess([], 0, "", "")
        extract_tar(tmp_path / "a.tar.gz", tmp_path / "out", strip_components=2)
        assert mock_run.call_args[0][0] == [
            "tar", "-xf", str(tmp_path / "a.tar.gz"),
            "-C", str(tmp_path / "out"),
            "--strip-components=2",
        ]

    @patch('installer.archive.subprocess.run')
    def test_non_zero_exit(self, mock_run, tmp_path):
        mock_run.return_value = subprocess.CompletedProcess([], 2, "", "tar: Error is not recoverable")
        with pytest.raises(ExtractionError, match="exit status 2"):
            extract_tar(tmp_path / "a.tar.gz", tmp_path)

    @patch('installer.archive.subprocess.run')
    def test_tar_missing(self, mock_run, tmp_path):
        mock_run.side_effect = FileNotFoundError("tar")
        with pytest.raises(ExtractionError, match="Unable to run tar"):
            extract_tar(tmp_path / "a.tar.gz", tmp_path)


class TestExtractZip:
    """Zip extraction keeps the archive layout."""

    def test_extracts(self, tmp_path):
        archive = tmp_path / "npm.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("node_modules/npm/bin/npm-cli.js", "// npm")
            zf.writestr("npm.cmd", "@echo off")

        extract_zip(archive, tmp_path / "out")

        assert (tmp_path / "out" / "node_modules" / "npm" / "bin" / "npm-cli.js").exists()
        assert (tmp_path / "out" / "npm.cmd").exists()

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "npm.zip"
        archive.write_bytes(b"not a zip")
        with pytest.raises(ExtractionError):
            extract_zip(archive, tmp_path / "out")
