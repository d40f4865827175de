#!/usr/bin/env python3
"""External PDF tooling: page counts, PDF to PostScript, and the final merge.

Converting each section to PostScript strips its own outline and metadata so
that the merged manual carries only the bookmarks we generate.

Dependencies: pypdf, Poppler (pdftops), GhostScript (gs)
"""
import logging
import os
import subprocess
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from manual_errors import ConversionFailed, CouldNotParseDocument, MergeFailed


def count_pages(pdf_path:Path) -> int:
    try:
        reader = PdfReader(str(pdf_path))
        pages = len(reader.pages)
    except (OSError, PyPdfError, ValueError) as e:
        raise CouldNotParseDocument(pdf_path, e) from e
    if pages < 1:
        raise CouldNotParseDocument(pdf_path, "document has no pages")
    return pages


def pdf_to_ps(pdf_path:Path, ps_path:Path, url:str=None, tool:str='pdftops') -> Path:
    """Convert one PDF with pdftops, renaming the result into place on success."""
    ps_path = Path(ps_path)
    ps_path.parent.mkdir(parents=True, exist_ok=True)
    part = ps_path.with_name(ps_path.name + '.part')
    try:
        result = subprocess.run([tool, str(pdf_path), str(part)], capture_output=True, text=True)
    except OSError as e:
        raise ConversionFailed(url, pdf_path, e) from e
    if result.returncode != 0:
        if part.exists():
            part.unlink()
        logging.debug(f"{tool} stderr for {pdf_path}: {result.stderr.strip()}")
        raise ConversionFailed(url, pdf_path, f"{tool} exited with status {result.returncode}")
    os.replace(part, ps_path)
    return ps_path


def combine(ps_paths:list[Path], pdfmarks_path:Path, out_path:Path, tool:str='gs') -> Path:
    """Merge PostScript files plus the bookmark descriptor into one PDF."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    args = [tool, '-dBATCH', '-sDEVICE=pdfwrite', '-o', str(out_path)]
    args.extend(str(p) for p in ps_paths)
    args.append(str(pdfmarks_path))
    logging.info(f"Combining {len(ps_paths)} PostScript files into {out_path}")
    try:
        result = subprocess.run(args)
    except OSError as e:
        raise MergeFailed(cause=e) from e
    if result.returncode != 0:
        raise MergeFailed(result.returncode)
    return out_path
