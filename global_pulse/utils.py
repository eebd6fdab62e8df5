from __future__ import annotations

import html
import re
from datetime import date
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse


UTM_PREFIXES = ("utm_", "fbclid", "gclid", "mc_cid", "mc_eid")


def normalize_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value or "").strip()


def strip_html(value: str) -> str:
    text = re.sub(r"<[^>]+>", " ", value or "")
    text = html.unescape(text)
    return normalize_whitespace(text)


def canonicalize_url(url: str) -> str:
    if not url:
        return ""
    parsed = urlparse(url)
    query_pairs = [
        (key, value)
        for key, value in parse_qsl(parsed.query, keep_blank_values=False)
        if not any(key.lower().startswith(prefix) for prefix in UTM_PREFIXES)
    ]
    cleaned = parsed._replace(
        query=urlencode(query_pairs),
        fragment="",
        scheme=parsed.scheme.lower(),
        netloc=parsed.netloc.lower(),
    )
    return urlunparse(cleaned)


def clean_title(title: str, separator: str = " - ") -> str:
    """Drop the trailing source attribution, e.g. "Summit Ends - Reuters"."""
    return (title or "").split(separator, 1)[0].strip()


def hard_truncate(text: str, max_chars: int, upper: bool = False) -> str:
    clipped = (text or "")[:max_chars]
    return clipped.upper() if upper else clipped


def matches_word(keyword: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}\b", text or "", flags=re.IGNORECASE) is not None


def display_date(day: date) -> str:
    return f"{day:%b} {day.day}, {day.year}".upper()
