"""
Heuristic extraction of tea attributes from a vendor product page.

Tuned for Magento-style shops (TeaVivre and friends): a product title in
h1.page-title, an og:image, a "Categories" info block, and a "Recommend
Brewing Method" table with a Chinese Gongfu column. Every step degrades to
an empty value rather than failing; only a missing name is fatal.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from core.scraper.errors import ExtractionError
from core.store.schema import TEA_TYPES, normalize_tea_type

# Text after the first of these belongs to reviews / cross-sells, not the product.
_REVIEW_PATTERNS = [
    re.compile(r"customers?\s+who\s+viewed", re.I),
    re.compile(r"customer\s+reviews?", re.I),
    re.compile(r"related\s+products?", re.I),
    re.compile(r"you\s+may\s+also\s+like", re.I),
    re.compile(r"recently\s+viewed", re.I),
]

_PUER_SPELLINGS = ("pu-er", "Pu-Er", "Pu-er")

_STEEP_PREFIX = re.compile(r"^[a-z]+\s*,\s*", re.I)  # "rinse, " before the numbers
_STEEP_SECONDS = re.compile(r"(\d+)\s*s", re.I)
_TEMPERATURE = re.compile(r"\d+\s*℉\s*/\s*\d+\s*℃")
_WEIGHT = re.compile(r"\d+\s*g\s*(?:tea)?", re.I)

# Ordered from most to least specific; the first hit wins.
_CAFFEINE_PATTERNS = [
    re.compile(r"((?:low|medium|high|very low|very high)\s+caffeine[^.\n]*(?:\([^)]*\))?)", re.I),
    re.compile(
        r"caffeine(?:\s+content)?[:\s]*"
        r"([^\n]*?(?:low|medium|high|less|more|very|\d+\s*mg|about|approx)(?:[^\n]*?)?)"
        r"(?=\n|$|[.!?])",
        re.I,
    ),
    re.compile(r"(\d+\s*-?\s*\d*\s*mg.*?caffeine|caffeine[:\s]*\d+\s*-?\s*\d*\s*mg)", re.I),
    re.compile(r"caffeine[^.\n]*", re.I),
]
_LESS_THAN_PERCENT = re.compile(r"less\s+than\s+(\d+)\s*%")
_PERCENT = re.compile(r"about\s+(\d+)\s*%|(\d+)\s*%")

MIN_STEEP_SECONDS = 3
MAX_STEEP_SECONDS = 999
MAX_CAFFEINE_TEXT = 200


def extract_name(soup: BeautifulSoup) -> str:
    title = soup.select_one("h1.page-title")
    name = title.get_text().strip() if title else ""
    if not name:
        first_h1 = soup.find("h1")
        name = first_h1.get_text().strip() if first_h1 else ""
    return name


def extract_image(soup: BeautifulSoup) -> str:
    meta = soup.select_one('meta[property="og:image"]')
    image = (meta.get("content") or "") if meta else ""
    if not image:
        gallery = soup.select_one(".gallery-placeholder__image")
        image = (gallery.get("src") or "") if gallery else ""
    return image.strip()


def product_text(soup: BeautifulSoup) -> str:
    """Page text up to the first reviews/related-products marker."""
    root = soup.body or soup
    text = root.get_text()
    cutoff = len(text)
    for pattern in _REVIEW_PATTERNS:
        match = pattern.search(text)
        if match and match.start() < cutoff:
            cutoff = match.start()
    return text[:cutoff]


def extract_type(soup: BeautifulSoup, body_text: str, name: str) -> str:
    tea_type = ""

    # Shop category block first
    for label in soup.select(".info-title"):
        if "Categories" not in label.get_text():
            continue
        container_text = label.parent.get_text() if label.parent else ""
        for candidate in TEA_TYPES:
            if candidate in container_text:
                tea_type = candidate
        if not tea_type and any(s in container_text for s in _PUER_SPELLINGS):
            tea_type = "PuEr"

    # Otherwise the type has to show up in the product name as well as the text
    if not tea_type:
        for candidate in TEA_TYPES:
            if candidate in body_text and candidate in name:
                tea_type = candidate
                break
        if not tea_type and ("pu-er" in body_text or "Pu-Er" in body_text) and "pu" in name:
            tea_type = "PuEr"

    return normalize_tea_type(tea_type)


def find_brewing_table(soup: BeautifulSoup) -> Optional[Tag]:
    for title in soup.select(".product-description-title"):
        text = title.get_text()
        if "Recommend" in text and "Brew" in text:
            table = title.find_next_sibling("table")
            if table is not None:
                return table
    return None


def extract_steep_times(table: Optional[Tag]) -> List[int]:
    """Seconds from the 'steeps:' cell, e.g. 'rinse, 20s, 25s, 30s' -> [20, 25, 30]."""
    steep_times: List[int] = []
    if table is None:
        return steep_times

    for cell in table.find_all("td"):
        cell_text = cell.get_text()
        lowered = cell_text.lower()
        if "steeps" not in lowered:
            continue
        marker = lowered.find("steeps:")
        if marker != -1:
            first_line = cell_text[marker + len("steeps:"):].split("\n")[0].strip()
            sequence = _STEEP_PREFIX.sub("", first_line)
            for match in _STEEP_SECONDS.finditer(sequence):
                seconds = int(match.group(1))
                if MIN_STEEP_SECONDS <= seconds <= MAX_STEEP_SECONDS:
                    steep_times.append(seconds)
        # only the first steeps cell counts
        break

    return sorted(steep_times)


def extract_gongfu_parameters(table: Optional[Tag]) -> Tuple[str, str]:
    """
    (brewing temperature, tea weight) from the Chinese Gongfu column.
    The table is laid out as label/value cell pairs, so the column is the
    cell index parity of the "Chinese Gongfu" header.
    """
    temperature = ""
    weight = ""
    if table is None:
        return temperature, weight

    cells = table.find_all("td")
    gongfu_offset = -1
    for idx, cell in enumerate(cells):
        if "chinese gongfu" in cell.get_text().lower():
            gongfu_offset = idx % 2
            break

    if gongfu_offset != 1:
        return temperature, weight

    for idx, cell in enumerate(cells):
        if idx % 2 != gongfu_offset:
            continue
        cell_text = cell.get_text().strip()
        if _TEMPERATURE.search(cell_text):
            temperature = cell_text
        if _WEIGHT.search(cell_text):
            weight = cell_text
    return temperature, weight


def extract_caffeine(body_text: str) -> str:
    for pattern in _CAFFEINE_PATTERNS:
        match = pattern.search(body_text)
        if not match:
            continue
        found = re.sub(r"\s+", " ", match.group(0)).strip()
        found = re.sub(r"^caffeine\s+", "", found, flags=re.I).strip()
        if 0 < len(found) < MAX_CAFFEINE_TEXT:
            return found
    return ""


def caffeine_level_from_text(caffeine: str) -> str:
    """Bucket free-text caffeine info into Low / Medium / High (default Low)."""
    text = (caffeine or "").lower()

    # "less than N%" is an upper bound, so the thresholds are inclusive
    less = _LESS_THAN_PERCENT.search(text)
    if less:
        pct = int(less.group(1))
        if pct <= 10:
            return "Low"
        if pct <= 25:
            return "Medium"
        return "High"

    percent = _PERCENT.search(text)
    if percent:
        pct = int(percent.group(1) or percent.group(2))
        if pct < 10:
            return "Low"
        if pct < 25:
            return "Medium"
        return "High"

    if "high" in text:
        return "High"
    if "low" in text:
        return "Low"
    if "medium" in text or "moderate" in text:
        return "Medium"
    return "Low"


def parse_tea_page(html: str, url: str) -> Dict:
    """
    Turn a product page into the import payload (camelCase keys, same shape
    the add-tea form and POST /api/teas accept). Raises ExtractionError when
    no product name can be found.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()

    name = extract_name(soup)
    if not name or name == "Error":
        raise ExtractionError("Scraping returned no valid name")

    body_text = product_text(soup)
    table = find_brewing_table(soup)
    temperature, weight = extract_gongfu_parameters(table)
    caffeine = extract_caffeine(body_text)

    return {
        "name": name,
        "type": extract_type(soup, body_text, name),
        "image": extract_image(soup),
        "steepTimes": extract_steep_times(table),
        "caffeine": caffeine,
        "caffeineLevel": caffeine_level_from_text(caffeine),
        "website": url,
        "brewingTemperature": temperature,
        "teaWeight": weight,
    }


__all__ = [
    "extract_name",
    "extract_image",
    "product_text",
    "extract_type",
    "find_brewing_table",
    "extract_steep_times",
    "extract_gongfu_parameters",
    "extract_caffeine",
    "caffeine_level_from_text",
    "parse_tea_page",
]
