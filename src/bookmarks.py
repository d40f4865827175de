#!/usr/bin/env python3
"""
Write the pdfmark bookmark descriptor that GhostScript applies while merging.

    [ /Title (SR22 Aircraft Maintenance Manual)
      /Author (Cirrus Design Inc.)
      /DOCINFO pdfmark
    [/Count -2 /Title (05 Time Limits) /Page 12 /OUT pdfmark
    [/Title (05-00 General) /Page 12 /OUT pdfmark
    [/Title (05-10 Inspections) /Page 15 /OUT pdfmark

A negative /Count makes the chapter start out collapsed.
"""
import logging
import os
from pathlib import Path

from manual_errors import BookmarkGenerationFailed, MalformedTOC, ManualError


def pdf_string(text:str) -> str:
    """Render text as a PostScript string literal.

    ASCII goes in a (literal) with \\, ( and ) escaped; anything else is
    written as UTF-16BE hex with a byte-order mark, which PDF viewers show
    correctly in the outline.
    """
    if text.isascii():
        escaped = text.replace('\\', '\\\\').replace('(', '\\(').replace(')', '\\)')
        return f"({escaped})"
    return '<FEFF' + text.encode('utf-16-be').hex().upper() + '>'


def generate_pdfmarks(manual, paginator, out_path:Path, author:str="") -> bool:
    """Write the descriptor unless it already exists.

    Returns True if a descriptor was written. Page lookups that fail raise
    BookmarkGenerationFailed; titles that cannot be encoded raise MalformedTOC.
    """
    out_path = Path(out_path)
    if out_path.exists():
        logging.info(f"Bookmark descriptor already exists: {out_path}")
        return False
    out_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        paginator.paginate()
        lines = [
            f"[ /Title {pdf_string(manual.title)}",
            f"  /Author {pdf_string(author)}",
            "  /DOCINFO pdfmark",
        ]
        for chapter in manual.chapters:
            page = paginator.chapter_first_page(chapter)
            lines.append(f"[/Count -{len(chapter.sections)} /Title {pdf_string(chapter.full_title)} /Page {page} /OUT pdfmark")
            for section in chapter.sections:
                page = paginator.section_first_page(chapter, section)
                lines.append(f"[/Title {pdf_string(section.full_title(chapter))} /Page {page} /OUT pdfmark")
    except UnicodeEncodeError as e:
        raise MalformedTOC(f"A title could not be encoded: {e}") from e
    except ManualError as e:
        raise BookmarkGenerationFailed(e) from e

    part = out_path.with_name(out_path.name + '.part')
    # every line is ASCII by construction
    with open(part, 'w', encoding='ascii', newline='\n') as f:
        for line in lines:
            f.write(line + '\n')
    os.replace(part, out_path)
    logging.info(f"Wrote {len(lines) - 3} bookmarks to {out_path}")
    return True
