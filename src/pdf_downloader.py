#!/usr/bin/env python3
"""Download one section PDF into the artifact store."""
import logging
import os
from pathlib import Path

import requests
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from manual_errors import FetchFailed

CHUNK_SIZE = 1 << 16


def download_pdf(url:str, out_path:Path, session:requests.Session, timeout=60) -> Path:
    """Stream `url` to `out_path`.

    The body is written to a .part file and only renamed into place once it
    opens as a PDF, so an existing `out_path` is always a complete download.
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    part = out_path.with_name(out_path.name + '.part')
    headers = {'User-Agent': 'Mozilla/5.0'}
    try:
        with session.get(url, headers=headers, stream=True, timeout=timeout) as r:
            if r.status_code // 100 != 2:
                raise FetchFailed(url, f"HTTP {r.status_code}")
            with open(part, 'wb') as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk: f.write(chunk)
        PdfReader(str(part))
    except requests.RequestException as e:
        _discard(part)
        raise FetchFailed(url, e) from e
    except (PyPdfError, ValueError) as e:
        _discard(part)
        raise FetchFailed(url, f"not a valid PDF ({e})") from e
    except OSError as e:
        # requests errors are OSErrors too; those are handled above
        _discard(part)
        raise FetchFailed(url, e) from e
    except BaseException:
        _discard(part)
        raise
    os.replace(part, out_path)
    logging.debug(f"Successfully downloaded PDF to: {out_path}")
    return out_path


def _discard(part:Path):
    if part.exists():
        part.unlink()
