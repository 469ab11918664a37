"""
Pydantic request and response models for the Court Scheduler API.

Times of day are "HH:mm" strings; instants are naive local ISO 8601
datetimes (no offset).
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

HHMM_REGEX = r"^([01]\d|2[0-3]):([0-5]\d)$"


def _require_naive(v: Optional[datetime]) -> Optional[datetime]:
    if v is not None and v.tzinfo is not None:
        raise ValueError("Times are local; send them without a UTC offset")
    return v


# =============================================================================
# Booking Models
# =============================================================================


class CreateBookingRequest(BaseModel):
    """Request to create a booking on an owned court."""

    court_id: str = Field(..., description="Court to reserve")
    start_time: datetime = Field(
        ...,
        description="Start (naive local time, inclusive)",
        examples=["2024-01-15T14:00:00"],
    )
    end_time: datetime = Field(
        ...,
        description="End (naive local time, exclusive)",
        examples=["2024-01-15T15:00:00"],
    )
    client_id: Optional[str] = Field(None, description="Client the booking is for")
    booking_date: Optional[date] = Field(
        None,
        description="Calendar day (defaults to the day of start_time)",
    )
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Price of the booking")
    payment_method: Optional[Literal["cash", "card", "transfer", "other"]] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_naive(cls, v: datetime) -> datetime:
        return _require_naive(v)


class UpdateBookingRequest(BaseModel):
    """
    Partial booking update.

    Omitted fields are left unchanged. Null clears notes or payment_method.
    """

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    booking_date: Optional[date] = None
    price: Optional[Decimal] = Field(None, ge=0)
    payment_method: Optional[Literal["cash", "card", "transfer", "other"]] = None
    payment_status: Optional[Literal["pending", "paid", "refunded"]] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_naive(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _require_naive(v)


class PublicBookingRequest(BaseModel):
    """Booking made through the public app."""

    court_id: str = Field(..., description="Court to reserve")
    booking_date: date = Field(..., examples=["2024-01-15"])
    start_time: str = Field(..., pattern=HHMM_REGEX, examples=["14:00"])
    end_time: str = Field(..., pattern=HHMM_REGEX, examples=["15:00"])
    is_app_native: bool = Field(default=True)
    app_user_id: Optional[str] = Field(None, max_length=100)
    client_id: Optional[str] = None
    contact_name: Optional[str] = Field(None, max_length=200)
    contact_phone: Optional[str] = Field(None, max_length=50)
    contact_email: Optional[str] = Field(None, max_length=255)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    payment_method: Optional[Literal["cash", "card", "transfer", "other"]] = None
    notes: Optional[str] = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    """A booking."""

    id: str = Field(..., description="Booking ID")
    court_id: str
    court_name: Optional[str] = None
    owner_id: str
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    booking_date: str = Field(..., description="Calendar day (ISO 8601)")
    start_time: str = Field(..., description="Start (ISO 8601, naive local)")
    end_time: str = Field(..., description="End (ISO 8601, naive local)")
    duration_minutes: int
    price: float
    payment_method: Optional[str] = None
    payment_status: str = Field(..., description="pending, paid or refunded")
    status: str = Field(..., description="pending, confirmed, cancelled or completed")
    notes: Optional[str] = None
    is_app_native: bool
    app_user_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    created_at: Optional[str] = None


class BookingListResponse(BaseModel):
    """Page of bookings."""

    bookings: list[BookingResponse] = Field(..., description="Bookings in this page")
    total: int = Field(..., description="Total number of matching bookings")
    page: int
    limit: int
    total_pages: int


class PublicBookingSummary(BaseModel):
    """Booking as shown to the public app (no contact data)."""

    id: str
    court_id: str
    booking_date: str
    start_time: str
    end_time: str
    status: str


class PublicBookingListResponse(BaseModel):
    bookings: list[PublicBookingSummary]
    total: int
    page: int
    limit: int
    total_pages: int


class BookingStatsResponse(BaseModel):
    """Booking counts and revenue for an owner."""

    total_bookings: int
    by_status: dict[str, int]
    total_revenue: float
    paid_revenue: float
    pending_revenue: float


# =============================================================================
# Blackout Models
# =============================================================================


class CreateBlackoutRequest(BaseModel):
    """
    Request to block a court.

    Omit both times for a full-day block on every day in the range.
    """

    court_id: str = Field(..., description="Court to block")
    start_date: date = Field(..., examples=["2024-01-20"])
    end_date: date = Field(..., examples=["2024-01-25"])
    start_time: Optional[str] = Field(None, pattern=HHMM_REGEX, examples=["14:00"])
    end_time: Optional[str] = Field(None, pattern=HHMM_REGEX, examples=["18:00"])
    reason: Literal["maintenance", "private_event", "weather", "other"] = Field(
        ...,
        description="Why the court is unavailable",
    )
    description: Optional[str] = Field(None, max_length=1000)


class UpdateBlackoutRequest(BaseModel):
    """Partial blackout update. Send null for both times to make it full-day."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = Field(None, pattern=HHMM_REGEX)
    end_time: Optional[str] = Field(None, pattern=HHMM_REGEX)
    reason: Optional[Literal["maintenance", "private_event", "weather", "other"]] = None
    description: Optional[str] = Field(None, max_length=1000)


class BlackoutResponse(BaseModel):
    """A court blackout."""

    id: str
    court_id: str
    start_date: str
    end_date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    full_day: bool
    reason: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[str] = None


class BlackoutListResponse(BaseModel):
    blackouts: list[BlackoutResponse]
    total: int


# =============================================================================
# Availability Models
# =============================================================================


class CourtSummary(BaseModel):
    id: str
    name: str
    sport_type: Optional[str] = None
    complex_name: Optional[str] = None
    is_active: bool


class ComplexContact(BaseModel):
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None


class CourtInfoResponse(BaseModel):
    """Public description of a court and how to reach its complex."""

    id: str
    name: str
    description: Optional[str] = None
    sport_type: Optional[str] = None
    is_active: bool
    complex: ComplexContact


class AvailabilityResponse(BaseModel):
    """Whether a court is free for a window."""

    court: CourtSummary
    date: str
    start_time: str
    end_time: str
    available: bool
    message: str
    conflicting_booking_id: Optional[str] = None
    blocked_by: Optional[BlackoutResponse] = None


class SlotResponse(BaseModel):
    start_time: str = Field(..., description="Slot start (HH:mm)")
    end_time: str = Field(..., description="Slot end (HH:mm)")
    available: bool
    reason: Optional[str] = Field(None, description="Blackout reason or 'existing booking'")
    booking_id: Optional[str] = None
    blackout_id: Optional[str] = None


class CourtRef(BaseModel):
    id: str
    name: str


class SlotsResponse(BaseModel):
    """Calendar grid of one court for one day."""

    court_id: str
    court: CourtRef
    date: str
    total_slots: int
    available_slots: int
    slots: list[SlotResponse]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "court_id": "6f1c2f0e-3d0b-4f52-9a55-2e6f0f5d9c11",
                "court": {"id": "6f1c2f0e-3d0b-4f52-9a55-2e6f0f5d9c11", "name": "Court 1 - Padel"},
                "date": "2024-01-15",
                "total_slots": 34,
                "available_slots": 32,
                "slots": [
                    {"start_time": "06:00", "end_time": "06:30", "available": True},
                    {
                        "start_time": "14:00",
                        "end_time": "14:30",
                        "available": False,
                        "reason": "existing booking",
                    },
                ],
            }
        }
    )


# =============================================================================
# Catalog Models
# =============================================================================


class CreateComplexRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class ComplexResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None


class CreateCourtRequest(BaseModel):
    complex_id: str = Field(..., description="Complex the court belongs to")
    name: str = Field(..., min_length=1, max_length=150)
    sport_type: Optional[str] = Field(None, max_length=50, examples=["padel"])
    description: Optional[str] = None
    is_active: bool = True


class CourtResponse(BaseModel):
    id: str
    complex_id: str
    name: str
    sport_type: Optional[str] = None
    description: Optional[str] = None
    is_active: bool


class CreateClientRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class ClientResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None


# =============================================================================
# Common Models
# =============================================================================


class ErrorResponse(BaseModel):
    """Error information for failed requests."""

    error_type: Literal[
        "validation_error",
        "not_found",
        "forbidden",
        "scheduling_conflict",
        "invalid_state",
        "persistence_error",
        "http_error",
        "internal_error",
    ] = Field(..., description="Type of error")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(None, description="Additional error details")
    retryable: bool = Field(default=False, description="Whether request can be retried")


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    database_connected: bool = Field(..., description="Database connection status")


class DeleteResponse(BaseModel):
    """Response for deleting a record."""

    success: bool = Field(..., description="Whether deletion was successful")
    id: str = Field(..., description="ID of deleted record")
    message: str = Field(..., description="Status message")
