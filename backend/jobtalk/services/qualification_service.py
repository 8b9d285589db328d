"""
Qualification Service — national qualification list from the Q-Net open API.

Responsibilities:
  • Sync technical (T) and professional (S) qualification lists (XML) into
    the in-process store, de-duplicated by code
  • Fall back to a built-in list when the API key is missing, the API is not
    activated yet (HTML instead of XML), the call fails, or nothing comes back
  • Keyword search and full name listing over the store
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET

import httpx

from jobtalk.config import settings
from jobtalk.models.qualification_models import Qualification, SyncResult
from jobtalk.services.exceptions import InvalidQuery, UpstreamRequestFailed
from jobtalk.utils.http_client import client_scope, error_body

logger = logging.getLogger(__name__)

QUALIFICATION_TYPES = ("T", "S")
SEARCH_LIMIT = 20
MIN_KEYWORD_LENGTH = 2
_HTML_TAG_RE = re.compile(r"<(head|meta)[\s>/]", re.IGNORECASE)

# Used until the Q-Net key is activated (activation takes 1-2 days)
TEMP_QUALIFICATIONS = [
    Qualification(code="0751", name="정보처리기사"),
    Qualification(code="0752", name="정보처리산업기사"),
    Qualification(code="0753", name="정보처리기능사"),
    Qualification(code="0754", name="컴퓨터시스템응용기술사"),
    Qualification(code="0755", name="정보관리기술사"),
    Qualification(code="0756", name="정보통신기술사"),
    Qualification(code="0915", name="컴퓨터활용능력 1급"),
    Qualification(code="0916", name="컴퓨터활용능력 2급"),
    Qualification(code="1320", name="워드프로세서"),
    Qualification(code="2290", name="정보보안기사"),
    Qualification(code="2291", name="정보보안산업기사"),
    Qualification(code="6921", name="빅데이터분석기사"),
    Qualification(code="4444", name="SQLD"),
    Qualification(code="5555", name="SQLP"),
    Qualification(code="6666", name="토익"),
    Qualification(code="7777", name="토익스피킹"),
    Qualification(code="8888", name="오픽"),
    Qualification(code="9999", name="JPT"),
    Qualification(code="1234", name="TEPS"),
    Qualification(code="5678", name="HSK"),
    Qualification(code="9101", name="JLPT"),
    Qualification(code="2220", name="리눅스마스터 1급"),
    Qualification(code="2221", name="리눅스마스터 2급"),
    Qualification(code="1111", name="네트워크관리사 2급"),
    Qualification(code="3333", name="AWS 솔루션스 아키텍트"),
]

# In-process store, seeded with the built-in list
_store: list[Qualification] = list(TEMP_QUALIFICATIONS)
_store_is_temporary = True


# ── Public API ───────────────────────────────────────────────────────────────


async def sync_qualifications(*, client: httpx.AsyncClient | None = None) -> SyncResult:
    """Replace the store with the live Q-Net lists, or the built-in list on failure."""
    if not settings.qualification_api_key:
        logger.warning("Q-Net API key is not configured; using built-in qualifications")
        return _load_temporary()

    collected: list[Qualification] = []
    try:
        async with client_scope(client) as http:
            for qual_type in QUALIFICATION_TYPES:
                logger.info(f"Fetching Q-Net qualification list type={qual_type}")
                xml_text = await _fetch_list(http, qual_type)
                try:
                    items = parse_qualification_xml(xml_text)
                except ValueError as e:
                    logger.error(f"Q-Net result error for type={qual_type}: {e}")
                    continue
                logger.info(f"Q-Net type={qual_type}: {len(items)} qualifications")
                collected.extend(items)
    except (UpstreamRequestFailed, ET.ParseError) as e:
        logger.warning(f"Q-Net sync failed ({e}); using built-in qualifications")
        return _load_temporary()

    unique = _dedupe_by_code(collected)
    if not unique:
        logger.warning("Q-Net returned no qualifications; using built-in qualifications")
        return _load_temporary()

    _replace_store(unique, temporary=False)
    logger.info(f"Stored {len(unique)} qualifications from Q-Net")
    return SyncResult(
        total_count=len(unique),
        message="Qualification sync completed",
        is_temporary=False,
    )


def search_qualifications(keyword: str | None) -> list[Qualification]:
    """Case-insensitive substring search by name, sorted by name, capped at SEARCH_LIMIT."""
    term = (keyword or "").strip()
    if len(term) < MIN_KEYWORD_LENGTH:
        raise InvalidQuery(f"Search keyword must be at least {MIN_KEYWORD_LENGTH} characters")

    needle = term.casefold()
    matches = [q for q in _store if needle in q.name.casefold()]
    return sorted(matches, key=lambda q: q.name)[:SEARCH_LIMIT]


def list_qualification_names() -> list[str]:
    """All qualification names, sorted."""
    return sorted(q.name for q in _store)


def is_temporary() -> bool:
    return _store_is_temporary


def parse_qualification_xml(xml_text: str) -> list[Qualification]:
    """
    Parse one Q-Net getList XML document.

    Raises:
        ET.ParseError: the document is not XML
        ValueError: the header result code is not "00"
    """
    root = ET.fromstring(xml_text)
    result_code = (root.findtext("header/resultCode") or "").strip()
    if result_code != "00":
        result_msg = (root.findtext("header/resultMsg") or "").strip()
        raise ValueError(f"resultCode={result_code or 'missing'} resultMsg={result_msg}")

    qualifications = []
    for item in root.findall("body/items/item"):
        code = (item.findtext("jmcd") or "").strip()
        name = (item.findtext("jmfldnm") or "").strip()
        if code and name:
            qualifications.append(Qualification(code=code, name=name))
    return qualifications


# ── Helpers ──────────────────────────────────────────────────────────────────


async def _fetch_list(http: httpx.AsyncClient, qual_type: str) -> str:
    url = f"{settings.qualification_api_base_url.rstrip('/')}/getList"
    params = {
        "serviceKey": settings.qualification_api_key,
        "qualgbcd": qual_type,
        "seriescd": "1",
    }
    try:
        resp = await http.get(url, params=params)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise UpstreamRequestFailed(
            "Failed to load qualifications",
            status_code=e.response.status_code,
            detail=error_body(e.response),
        ) from e
    except httpx.RequestError as e:
        raise UpstreamRequestFailed("Failed to load qualifications", detail=str(e)) from e

    text = resp.text
    if _looks_like_html(text):
        raise UpstreamRequestFailed(
            "Q-Net returned an HTML page instead of XML; the API key may not be active yet",
            detail=text[:100],
        )
    return text


def _looks_like_html(text: str) -> bool:
    head = text.lstrip()[:15].lower()
    if head.startswith("<!doctype html") or head.startswith("<html"):
        return True
    # <header> is a legitimate Q-Net XML element; only the HTML tags count
    return _HTML_TAG_RE.search(text) is not None


def _dedupe_by_code(qualifications: list[Qualification]) -> list[Qualification]:
    unique: dict[str, Qualification] = {}
    for q in qualifications:
        unique.setdefault(q.code, q)
    return list(unique.values())


def _replace_store(qualifications: list[Qualification], *, temporary: bool) -> None:
    global _store, _store_is_temporary
    _store = list(qualifications)
    _store_is_temporary = temporary


def _load_temporary() -> SyncResult:
    _replace_store(TEMP_QUALIFICATIONS, temporary=True)
    return SyncResult(
        total_count=len(TEMP_QUALIFICATIONS),
        message="Built-in qualification list loaded (used until the Q-Net API key is active)",
        is_temporary=True,
    )
