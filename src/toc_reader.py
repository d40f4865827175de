#!/usr/bin/env python3
"""
Read the table of contents frame of a manual's HTML page.

The frame looks like:

    <p><b>SR22 Aircraft Maintenance Manual</b></p>
    <ul id="x">
      <li>Front Matter
        <ul><li><a href="../fm/title.pdf#page=1">Title Page</a></li></ul>
      </li>
      <li>Chapter 5 - Time Limits
        <ul><li><a href="../05/05-00.pdf">5-00 General</a></li></ul>
      </li>
    </ul>

Some manuals wrap each chapter item in <nobr>.
"""
import logging
import re

import requests
from bs4 import BeautifulSoup, NavigableString

from manual_errors import BadEncoding, FetchFailed, MalformedTOC

CHAPTER_RE = re.compile(r'^Chapter (\d+) - (.+)$')
SECTION_RE = re.compile(r'^(?:\d+-(\d+) )?(.+)$')
# a UTF-8 non-breaking space read as cp1250 comes out as 'Â\xa0'
EDGE_SPACE_RE = re.compile(r'^(?:\s|Â\xa0)+|(?:\s|Â\xa0)+$')


def strip(text:str) -> str:
    return EDGE_SPACE_RE.sub('', text)


def fetch_toc(url:str, session:requests.Session, encoding:str='cp1250', timeout=60) -> str:
    logging.info(f"Fetching table of contents from URL: {url}")
    try:
        r = session.get(url, headers={'User-Agent': 'Mozilla/5.0'}, timeout=timeout)
    except requests.RequestException as e:
        raise FetchFailed(url, e) from e
    if r.status_code // 100 != 2:
        raise FetchFailed(url, f"HTTP {r.status_code}")
    try:
        return r.content.decode(encoding)
    except UnicodeDecodeError as e:
        raise BadEncoding(encoding) from e


def own_text(tag) -> str:
    return ''.join(str(c) for c in tag.children if isinstance(c, NavigableString))


def extract(document:str, base_url:str=None):
    """Parse the frame into {title, items: [{chapter_number, chapter_title, sections}]}.

    Section hrefs are returned as written (fragment removed); resolving them
    against the frame's URL is up to the caller.
    """
    soup = BeautifulSoup(document, 'html.parser')
    title_tag = soup.select_one('p > b')
    if title_tag is None:
        raise MalformedTOC("The page has no title.")
    title = strip(title_tag.get_text())

    items = []
    for li in soup.select('ul#x > li, ul#x > nobr > li'):
        text = strip(own_text(li))
        m = CHAPTER_RE.match(text)
        if m:
            chapter_number, chapter_title = int(m.group(1)), m.group(2)
        else:
            chapter_number, chapter_title = None, text

        sections = []
        for a in li.select('ul > li > a'):
            href = a.get('href')
            if not href:
                raise MalformedTOC(f"A section link in {chapter_title!r} has no href.")
            m = SECTION_RE.match(strip(a.get_text()))
            if not m:
                raise MalformedTOC(f"A section in {chapter_title!r} has no title.")
            sections.append({
                "section_number": int(m.group(1)) if m.group(1) else None,
                "section_title": strip(m.group(2)),
                "href": href.split('#', 1)[0],
            })
        items.append({"chapter_number": chapter_number, "chapter_title": chapter_title, "sections": sections})

    if not items:
        raise MalformedTOC("The page lists no chapters.")
    logging.info(f"Extracted {len(items)} chapters from table of contents: {base_url}")
    return {"title": title, "items": items}


def read_toc(url:str, session:requests.Session, encoding:str='cp1250', timeout=60):
    return extract(fetch_toc(url, session, encoding, timeout), url)
