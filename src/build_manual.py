#!/usr/bin/env python3
"""
Assemble a maintenance manual published as separate section PDFs.

- Read the manual's table of contents frame (cached as book.json),
- Download every section PDF,
- Convert each PDF to PostScript, dropping its own bookmarks,
- Generate chapter/section bookmarks with page numbers,
- Merge everything into one PDF with GhostScript.

Each step saves its results in the working directory and skips work that is
already there, so a failed run can simply be repeated.

Usage example:

python build_manual.py \
  http://servicecenters.cirrusdesign.com/tech_pubs/SR2X/pdf/amm/SR22/html/ammtoc.html \
  --work work \
  --filename AMM.pdf \
  --verbose

"""
import argparse
import logging
import sys
from pathlib import Path

from manual_assembler import ManualAssembler
from manual_config import MANUAL_CONFIGS, get_config
from manual_errors import ManualError


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description='Assemble a maintenance manual into one PDF')
    ap.add_argument('url', nargs='?', default=None,
                    help='The URL for the manual table of contents frame')
    ap.add_argument('--manual', default=None, choices=sorted(MANUAL_CONFIGS),
                    help='Named manual configuration')
    ap.add_argument('-w', '--work', default=None,
                    help='The working directory for temporary files (resumable)')
    ap.add_argument('-f', '--filename', default=None,
                    help='The name of the output PDF file (stored in working directory)')
    ap.add_argument('-v', '--verbose', action='store_true',
                    help='Include extra information in the output.')
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    config = get_config(args.manual)
    url = args.url or config['default_toc_url']
    workdir = Path(args.work or config['default_workdir']).resolve()
    filename = args.filename or config['default_output']
    logging.info(f"Parsed arguments: url={url}, work={workdir}, filename={filename}")

    assembler = ManualAssembler(url, workdir, filename, config=config, show_progress=args.verbose)
    try:
        out_pdf = assembler.run()
    except ManualError as e:
        logging.error(f"{e.description} {e.reason}")
        if e.suggestion:
            logging.error(e.suggestion)
        return 1

    print('Finished manual is at', out_pdf)
    return 0


if __name__=='__main__':
    sys.exit(main())
