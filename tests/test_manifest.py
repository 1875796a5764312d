# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for manifest resolution."""

from pathlib import Path

from pdftrace.manifest import PDF_MANIFEST, get_pdf_files


def test_default_manifest_resolves_under_cwd_pdfs():
    files = get_pdf_files()
    assert len(files) == len(PDF_MANIFEST) == 8
    assert files[0].filename == "META-Q4-2024-Earnings-Call-Transcript.pdf"
    assert files[0].path == Path.cwd() / "pdfs" / files[0].filename
    assert all(f.url.startswith("https://") for f in files)


def test_custom_dir_and_manifest(tmp_path):
    files = get_pdf_files(tmp_path, [{"filename": "x.pdf", "url": "https://e.com/x.pdf"}])
    assert [(f.filename, f.url, f.path) for f in files] == [
        ("x.pdf", "https://e.com/x.pdf", tmp_path / "x.pdf")
    ]


def test_missing_files_are_not_checked(tmp_path):
    files = get_pdf_files(tmp_path / "nowhere")
    assert not files[0].path.exists()
