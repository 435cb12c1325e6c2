"""
Rule-based quotation parser used when model-based extraction is unavailable.

Walks the document line by line, applying pattern rules in a fixed order and
tracking which section (inclusions, exclusions, itinerary) the line belongs to.
Each field has its own resolution policy:

- destination, duration, pax: first match wins
- base cost: largest candidate above COST_THRESHOLD wins
- hotels: unique by name; inclusions/exclusions: unique by content
- itinerary activities: attach to the most recent day block
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from ..models import NOT_SPECIFIED, HotelEntry, ItineraryDay, QuotationRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Patterns and Constants
# =============================================================================

DESTINATION_PATTERN = re.compile(
    r"(?:destination|tour.*?to|package.*?for)[:\s-]+([^,\n\r]+)", re.IGNORECASE
)
DURATION_PATTERN = re.compile(
    r"(\d+)\s*(?:days?)\s*[/&-]\s*(\d+)\s*(?:nights?)", re.IGNORECASE
)
PAX_PATTERN = re.compile(r"(\d+)\s*(?:adults?|pax|persons?)", re.IGNORECASE)
# Only 1-2 leading digits before comma groups: "45,000" and "1,25,000" match,
# an ungrouped "150000" yields 15.
COST_PATTERN = re.compile(
    r"(?:total|cost|price|amount)[:\s]*(?:rs\.?|₹|inr)?\s*(\d{1,2}(?:,\d{2,3})*)",
    re.IGNORECASE,
)
HOTEL_PATTERN = re.compile(r"hotel[:\s]+([^,\n\r]+)", re.IGNORECASE)
DAY_PATTERN = re.compile(r"day\s*(\d+)[:\s-]*(.*)", re.IGNORECASE)
BULLET_PATTERN = re.compile(r"^[-•*]\s*")

BULLET_MARKERS = ("-", "•", "*")

COST_THRESHOLD = 1000
DEFAULT_HOTEL_NIGHTS = 2
DEFAULT_ROOM_TYPE = "Standard Room"

# Lines longer than this are section content even without a bullet
MIN_SECTION_LINE_LENGTH = 10
MIN_ACTIVITY_LINE_LENGTH = 5


class Section(str, Enum):
    """Document sections that collect the lines following their heading."""

    NONE = "none"
    INCLUSIONS = "inclusions"
    EXCLUSIONS = "exclusions"
    ITINERARY = "itinerary"


@dataclass
class _ParseState:
    """Mutable state for a single parse; never shared between calls."""

    destination: str = NOT_SPECIFIED
    duration: str = NOT_SPECIFIED
    pax_count: str = NOT_SPECIFIED
    base_cost: int = 0
    hotels: list[HotelEntry] = field(default_factory=list)
    inclusions: list[str] = field(default_factory=list)
    exclusions: list[str] = field(default_factory=list)
    itinerary: list[ItineraryDay] = field(default_factory=list)
    section: Section = Section.NONE
    current_day: int = 0


# =============================================================================
# Line Rules
# =============================================================================


def _strip_bullet(line: str) -> str:
    return BULLET_PATTERN.sub("", line).strip()


def _match_destination(state: _ParseState, line: str) -> None:
    if state.destination != NOT_SPECIFIED:
        return
    match = DESTINATION_PATTERN.search(line)
    if match and match.group(1).strip():
        state.destination = match.group(1).strip()


def _match_duration(state: _ParseState, line: str) -> None:
    if state.duration != NOT_SPECIFIED:
        return
    match = DURATION_PATTERN.search(line)
    if match:
        state.duration = f"{match.group(1)} Days {match.group(2)} Nights"


def _match_pax(state: _ParseState, line: str) -> None:
    if state.pax_count != NOT_SPECIFIED:
        return
    match = PAX_PATTERN.search(line)
    if match:
        state.pax_count = f"{match.group(1)} Adults"


def _match_cost(state: _ParseState, line: str) -> None:
    """Keep the largest cost figure seen so far, ignoring small numbers."""
    match = COST_PATTERN.search(line)
    if not match:
        return
    cost = int(match.group(1).replace(",", ""))
    if cost > COST_THRESHOLD and cost > state.base_cost:
        state.base_cost = cost


def _match_hotel(state: _ParseState, line: str) -> None:
    match = HOTEL_PATTERN.search(line)
    if not match:
        return
    name = match.group(1).strip()
    if not name or any(hotel.name == name for hotel in state.hotels):
        return
    state.hotels.append(
        HotelEntry(
            name=name,
            location=state.destination,
            nights=DEFAULT_HOTEL_NIGHTS,
            room_type=DEFAULT_ROOM_TYPE,
        )
    )


def _detect_section(state: _ParseState, line: str) -> None:
    lower_line = line.lower()
    if "inclusion" in lower_line:
        state.section = Section.INCLUSIONS
    elif "exclusion" in lower_line:
        state.section = Section.EXCLUSIONS
    elif "itinerary" in lower_line:
        state.section = Section.ITINERARY


def _collect_section_item(state: _ParseState, line: str) -> None:
    if state.section == Section.INCLUSIONS:
        items = state.inclusions
    elif state.section == Section.EXCLUSIONS:
        items = state.exclusions
    else:
        return

    if not (line.startswith(BULLET_MARKERS) or len(line) > MIN_SECTION_LINE_LENGTH):
        return
    content = _strip_bullet(line)
    if content and content not in items:
        items.append(content)


def _collect_itinerary(state: _ParseState, line: str) -> None:
    if state.section != Section.ITINERARY:
        return

    match = DAY_PATTERN.search(line)
    if match:
        state.current_day = int(match.group(1))
        state.itinerary.append(
            ItineraryDay(
                day=state.current_day,
                title=match.group(2).strip() or f"Day {state.current_day}",
            )
        )
    elif state.current_day > 0 and len(line) > MIN_ACTIVITY_LINE_LENGTH:
        activity = _strip_bullet(line)
        if activity and state.itinerary:
            state.itinerary[-1].activities.append(activity)


# Applied to every line, in this order
LINE_RULES = (
    _match_destination,
    _match_duration,
    _match_pax,
    _match_cost,
    _match_hotel,
    _detect_section,
    _collect_section_item,
    _collect_itinerary,
)


# =============================================================================
# Public API
# =============================================================================


def parse_quotation_text(text: str) -> QuotationRecord:
    """
    Extract a QuotationRecord from plain text using line-based rules.

    Deterministic and side-effect free: the same text always yields an equal
    record. Fields without a match keep their defaults.

    Args:
        text: Plain text extracted from the quotation document.

    Returns:
        The parsed QuotationRecord.
    """
    state = _ParseState()

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        for rule in LINE_RULES:
            rule(state, line)

    logger.info(
        "Fallback parse: destination=%s, hotels=%d, itinerary days=%d, base cost=%d",
        state.destination,
        len(state.hotels),
        len(state.itinerary),
        state.base_cost,
    )

    return QuotationRecord(
        destination=state.destination,
        duration=state.duration,
        pax_count=state.pax_count,
        base_cost=state.base_cost,
        hotels=state.hotels,
        inclusions=state.inclusions,
        exclusions=state.exclusions,
        itinerary=state.itinerary,
    )
