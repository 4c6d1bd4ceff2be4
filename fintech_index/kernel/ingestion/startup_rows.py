"""
Normalisation of spreadsheet rows posted to ``POST /startups/bulk``.

Rows arrive as parsed JSON objects whose keys may be API field names or the
column headings of the directory export (``Organization Name``,
``Headquarters Location``, ``Industries``, ``Founded Date``...).
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from fintech_index.kernel.models.startup import (
    COUNTRY_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SECTOR_MAX_LENGTH,
    WEBSITE_MAX_LENGTH,
    parse_sectors,
    serialize_sectors,
)

NAME_KEYS = ("name", "Name", "NAME", "Company Name", "Company name", "Organization Name", "Organization name")
COUNTRY_KEYS = (
    "country", "Country", "COUNTRY", "Country Name", "Country name",
    "Headquarters Location", "Headquarters location", "Location",
)
SECTOR_KEYS = (
    "sectors", "sector", "Sector", "SECTOR", "Business Sector", "Business sector",
    "Industries", "Industry Groups", "Industry",
)
YEAR_KEYS = (
    "foundedYear", "founded_year", "Founded Year", "Founded year", "Year Founded", "Year founded",
    "Founded Date", "Founded date",
)
DESCRIPTION_KEYS = ("description", "Description", "DESC", "Full Description")
WEBSITE_KEYS = ("website", "Website", "URL", "url", "Organization Name URL")

AFRICAN_COUNTRIES = (
    "Algeria", "Angola", "Benin", "Botswana", "Burkina Faso", "Burundi", "Cabo Verde", "Cameroon",
    "Central African Republic", "Chad", "Comoros", "Congo", "Democratic Republic of the Congo",
    "Djibouti", "Egypt", "Equatorial Guinea", "Eritrea", "Eswatini", "Ethiopia", "Gabon", "Gambia",
    "Ghana", "Guinea", "Guinea-Bissau", "Ivory Coast", "Kenya", "Lesotho", "Liberia", "Libya",
    "Madagascar", "Malawi", "Mali", "Mauritania", "Mauritius", "Morocco", "Mozambique", "Namibia",
    "Niger", "Nigeria", "Rwanda", "Sao Tome and Principe", "Senegal", "Seychelles", "Sierra Leone",
    "Somalia", "South Africa", "South Sudan", "Sudan", "Tanzania", "Togo", "Tunisia", "Uganda",
    "Zambia", "Zimbabwe",
)
_AFRICAN_LOWER = {c.lower(): c for c in AFRICAN_COUNTRIES}

_YEAR_IN_TEXT = re.compile(r"\b(?:19|20)\d{2}\b")
# Spreadsheet day 25569 is 1970-01-01
_UNIX_EPOCH_SERIAL = 25569
# Five-digit numbers are day serials (10000 falls in 1927); shorter ones are years
_MIN_SERIAL = 10000
_MAX_SERIAL = 100000
MIN_FOUNDED_YEAR = 1900


@dataclass
class StartupRow:
    """A row that passed normalisation."""

    name: str
    country: str
    sectors: List[str]
    founded_year: int
    description: str = ""
    website: str = ""


def _first(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_founded_year(value: Any, current_year: Optional[int] = None) -> Optional[int]:
    """
    Read a founded year from a cell value.

    Strings yield the first 4-digit 19xx/20xx year they contain. Five-digit
    numbers are spreadsheet serial day numbers; other numbers are years.
    NaN, infinities and anything outside 1900..current year are rejected.
    """
    current_year = current_year or datetime.now(timezone.utc).year
    year: Optional[int] = None

    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        match = _YEAR_IN_TEXT.search(text)
        if match:
            year = int(match.group(0))
    elif isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        number = int(value)
        if _MIN_SERIAL <= number < _MAX_SERIAL:
            epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
            year = (epoch + timedelta(days=number - _UNIX_EPOCH_SERIAL)).year
        else:
            year = number

    if year is None or year < MIN_FOUNDED_YEAR or year > current_year:
        return None
    return year


def extract_country(location: Any) -> str:
    """
    "Dar Es Salaam, Dar es Salaam, Tanzania" -> "Tanzania".

    Returns the last comma-separated part when it names an African country,
    otherwise the trimmed location unchanged.
    """
    text = str(location).strip()
    last = text.split(",")[-1].strip()
    return _AFRICAN_LOWER.get(last.lower(), text)


def fits_columns(row: StartupRow) -> bool:
    """True when every field fits its column in the startups table."""
    return (
        len(row.name) <= NAME_MAX_LENGTH
        and len(row.country) <= COUNTRY_MAX_LENGTH
        and len(serialize_sectors(row.sectors)) <= SECTOR_MAX_LENGTH
        and len(row.website) <= WEBSITE_MAX_LENGTH
    )


def _sectors(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return parse_sectors(str(value))


def normalize_row(row: Mapping[str, Any], current_year: Optional[int] = None) -> Optional[StartupRow]:
    """Map one raw row to a StartupRow, or None when it is unusable."""
    if not isinstance(row, Mapping):
        return None
    name = _first(row, NAME_KEYS)
    location = _first(row, COUNTRY_KEYS)
    sector = _first(row, SECTOR_KEYS)
    founded = _first(row, YEAR_KEYS)
    if not (name and location and sector and founded):
        return None

    year = parse_founded_year(founded, current_year)
    sectors = _sectors(sector)
    if year is None or not sectors:
        return None

    parsed = StartupRow(
        name=str(name).strip(),
        country=extract_country(location),
        sectors=sectors,
        founded_year=year,
        description=str(_first(row, DESCRIPTION_KEYS) or ""),
        website=str(_first(row, WEBSITE_KEYS) or ""),
    )
    return parsed if fits_columns(parsed) else None


def normalize_rows(
    rows: Sequence[Mapping[str, Any]],
    current_year: Optional[int] = None,
) -> Tuple[List[StartupRow], List[int]]:
    """
    Returns:
        (valid rows, 0-based indexes of skipped rows)
    """
    valid: List[StartupRow] = []
    skipped: List[int] = []
    for index, row in enumerate(rows):
        parsed = normalize_row(row, current_year)
        if parsed is None:
            skipped.append(index)
        else:
            valid.append(parsed)
    return valid, skipped


def row_to_fields(row: StartupRow) -> Dict[str, Any]:
    return {
        "name": row.name,
        "country": row.country,
        "sectors": row.sectors,
        "founded_year": row.founded_year,
        "description": row.description,
        "website": row.website,
    }
