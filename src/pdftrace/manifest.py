# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Static manifest of the earnings-call transcripts to summarize."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class PdfFile(BaseModel):
    """A manifest entry resolved to its local path."""

    filename: str
    url: str
    path: Path


PDF_MANIFEST: list[dict[str, str]] = [
    {
        "filename": "META-Q4-2024-Earnings-Call-Transcript.pdf",
        "url": "https://s21.q4cdn.com/399680738/files/doc_financials/2024/q4/META-Q4-2024-Earnings-Call-Transcript.pdf",
    },
    {
        "filename": "walmart-q4-fy25-earnings-call-transcript.pdf",
        "url": "https://corporate.walmart.com/content/dam/corporate/documents/newsroom/2025/02/20/walmart-releases-q4-fy25-earnings/q4-fy25-earnings-call-transcript.pdf",
    },
    {
        "filename": "Citi-4Q24-Earnings-Transcript.pdf",
        "url": "https://www.citigroup.com/rcs/citigpa/storage/public/Earnings/Q42024/4Q24-Earnings-Transcript.pdf",
    },
    {
        "filename": "jpmc-4q24-earnings-transcript.pdf",
        "url": "https://www.jpmorganchase.com/content/dam/jpmc/jpmorgan-chase-and-co/investor-relations/documents/quarterly-earnings/2024/4th-quarter/4q24-earnings-transcript.pdf",
    },
    {
        "filename": "adobe-a4t3greafe.pdf",
        "url": "https://www.adobe.com/cc-shared/assets/investor-relations/pdfs/21305202/a4t3greafe.pdf",
    },
    {
        "filename": "Qualcomm_Q1FY25EC_Transcript_2-5-24.pdf",
        "url": "https://s204.q4cdn.com/645488518/files/doc_events/2025/Feb/05/QCOM_Q1FY25EC_Transcript_2-5-24.pdf",
    },
    {
        "filename": "autodesk-q4-2025.pdf",
        "url": "https://investors.autodesk.com/static-files/19993aff-b8f9-4d6a-9d6d-84062c13b4f8",
    },
    {
        "filename": "homedepot-4q24-transcript.pdf",
        "url": "https://ir.homedepot.com/~/media/Files/H/HomeDepot-IR/documents/hd-4q24-transcript.pdf",
    },
]


def get_pdf_files(
    pdf_dir: str | Path | None = None,
    manifest: list[dict[str, str]] | None = None,
) -> list[PdfFile]:
    """Resolve manifest entries to `<pdf_dir>/<filename>`.

    `pdf_dir` defaults to `<cwd>/pdfs`. Filenames are taken verbatim and the
    files are not checked for existence here.
    """
    base = Path(pdf_dir) if pdf_dir is not None else Path.cwd() / "pdfs"
    entries = PDF_MANIFEST if manifest is None else manifest
    return [
        PdfFile(filename=entry["filename"], url=entry["url"], path=base / entry["filename"])
        for entry in entries
    ]
