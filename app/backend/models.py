"""
Pydantic models for the DMC quotation pipeline.

Defines the canonical QuotationRecord produced by both the model-based and
the fallback extraction paths, plus the API response envelopes.

Attributes are snake_case in Python and serialized with the camelCase names
the front end expects (``paxCount``, ``baseCost``, ``roomType``, ...).
"""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

NOT_SPECIFIED = "Not specified"


def _normalize_text(value: Any) -> Any:
    """Map missing or blank values to the NOT_SPECIFIED sentinel."""
    if value is None:
        return NOT_SPECIFIED
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or NOT_SPECIFIED
    return value


def _unique_strings(values: list[str]) -> list[str]:
    """Drop blank and repeated entries, keeping first-seen order."""
    unique: list[str] = []
    for value in values:
        value = value.strip()
        if value and value not in unique:
            unique.append(value)
    return unique


class HotelEntry(BaseModel):
    """
    A hotel stay listed in the quotation.

    Attributes:
        name: Hotel name as written in the document.
        location: City or region of the hotel.
        nights: Number of nights booked at this hotel.
        room_type: Room category (serialized as ``roomType``).
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Hotel name")
    location: str = Field(default=NOT_SPECIFIED, description="Hotel location")
    nights: int = Field(default=0, ge=0, description="Nights at this hotel")
    room_type: str = Field(
        default=NOT_SPECIFIED,
        alias="roomType",
        description="Room category",
        examples=["Standard Room", "Deluxe Room"],
    )

    @field_validator("name", "location", "room_type", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Any:
        """Replace blank strings with the sentinel."""
        return _normalize_text(v)

    @field_validator("nights", mode="before")
    @classmethod
    def default_missing_nights(cls, v: Any) -> Any:
        return 0 if v is None else v


class ItineraryDay(BaseModel):
    """A single day block of the itinerary."""

    day: int = Field(..., gt=0, description="Day number (1-based)")
    title: str = Field(default="", description="Day title")
    activities: list[str] = Field(
        default_factory=list,
        description="Activities for the day, in document order",
    )

    @field_validator("title", mode="before")
    @classmethod
    def coerce_title(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("activities", mode="before")
    @classmethod
    def coerce_activities(cls, v: Any) -> Any:
        return [] if v is None else v

    @model_validator(mode="after")
    def default_title(self) -> "ItineraryDay":
        """Fall back to "Day N" when no title was given."""
        self.title = self.title.strip() or f"Day {self.day}"
        self.activities = [a.strip() for a in self.activities if a and a.strip()]
        return self


class QuotationRecord(BaseModel):
    """
    Structured travel quotation extracted from a DMC document.

    Every string field is non-empty: anything not found in the document is
    reported as "Not specified". Hotels are unique by name, inclusions and
    exclusions are unique by content.
    """

    model_config = ConfigDict(populate_by_name=True)

    destination: str = Field(default=NOT_SPECIFIED, description="Trip destination")
    duration: str = Field(
        default=NOT_SPECIFIED,
        description="Trip length",
        examples=["5 Days 4 Nights"],
    )
    pax_count: str = Field(
        default=NOT_SPECIFIED,
        validation_alias=AliasChoices("paxCount", "pax", "pax_count"),
        serialization_alias="paxCount",
        description="Traveler count",
        examples=["2 Adults"],
    )
    base_cost: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("baseCost", "base_cost"),
        serialization_alias="baseCost",
        description="Largest package cost figure found in the document",
    )
    hotels: list[HotelEntry] = Field(default_factory=list)
    inclusions: list[str] = Field(default_factory=list)
    exclusions: list[str] = Field(default_factory=list)
    itinerary: list[ItineraryDay] = Field(default_factory=list)

    @field_validator("destination", "duration", "pax_count", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Any:
        """
        Replace missing or blank strings with the sentinel.

        Bare numbers are rejected: these fields carry formatted text such as
        "2 Adults" or "5 Days 4 Nights".
        """
        if v is not None and not isinstance(v, str):
            raise ValueError(f"expected text, got {type(v).__name__}")
        return _normalize_text(v)

    @field_validator("base_cost", mode="before")
    @classmethod
    def default_missing_cost(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("hotels", "inclusions", "exclusions", "itinerary", mode="before")
    @classmethod
    def coerce_missing_lists(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("inclusions", "exclusions")
    @classmethod
    def dedupe_strings(cls, v: list[str]) -> list[str]:
        """Ensure inclusion/exclusion entries are unique."""
        return _unique_strings(v)

    @field_validator("hotels")
    @classmethod
    def dedupe_hotels(cls, v: list[HotelEntry]) -> list[HotelEntry]:
        """Ensure hotel names are unique, keeping the first entry."""
        seen: set[str] = set()
        unique: list[HotelEntry] = []
        for hotel in v:
            if hotel.name not in seen:
                seen.add(hotel.name)
                unique.append(hotel)
        return unique


class ProcessedQuotation(QuotationRecord):
    """QuotationRecord plus the metadata attached after processing."""

    file_name: str = Field(
        ...,
        serialization_alias="fileName",
        validation_alias=AliasChoices("fileName", "file_name"),
        description="Original filename of the uploaded document",
    )
    processed_at: str = Field(
        ...,
        serialization_alias="processedAt",
        validation_alias=AliasChoices("processedAt", "processed_at"),
        description="Processing timestamp (ISO-8601, UTC)",
    )
    extracted_text_preview: str = Field(
        default="",
        serialization_alias="extractedTextPreview",
        validation_alias=AliasChoices("extractedTextPreview", "extracted_text_preview"),
        description="First characters of the extracted document text",
    )


class ProcessQuotationResponse(BaseModel):
    """Response model for the process-dmc endpoint."""

    success: bool = Field(default=True)
    data: ProcessedQuotation


class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""

    error: str = Field(..., description="Human-readable error message")
    details: str | None = Field(default=None, description="Diagnostic details")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")
    message: str = Field(default="")
