"""Strict models for rows exported from the facility spreadsheet.

Sheet cells arrive loosely typed: booleans as ``"TRUE"``, times as day
fractions or ``9:30 AM``, blank strings for missing values, and team names
under either ``team_name`` or ``name``. These models absorb those quirks once
so nothing downstream has to.
"""
from __future__ import annotations

import datetime as dt
import re
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from court_scheduler.core.errors import InvalidTime
from court_scheduler.models.closure import ALL_COURTS
from court_scheduler.models.court import CourtStatus
from court_scheduler.models.reservation import (
    CancelReason,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
    ReservationStatus,
    ReservationType,
)

_HH_MM = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_AM_PM = re.compile(r"^(\d{1,2})(?::(\d{2}))?(?::\d{2})?\s*([AaPp][Mm])$")
_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

_TRUE_VALUES = {"true", "yes", "y", "1", "x"}
_FALSE_VALUES = {"false", "no", "n", "0", ""}


def _format(hours: int, minutes: int, raw: Any) -> str:
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise InvalidTime(f"Time {raw!r} is out of range")
    return f"{hours:02d}:{minutes:02d}"


def _from_fraction(fraction: float, raw: Any) -> str:
    total = round(fraction * 24 * 60)
    return _format(*divmod(total, 60), raw)


def normalize_time(value: Any) -> str | None:
    """Coerce a sheet time cell to ``HH:MM``; blank cells become ``None``."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return _format(value.hour, value.minute, value)
    if isinstance(value, time):
        return _format(value.hour, value.minute, value)
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        number = float(value)
        if 0 <= number < 1:
            return _from_fraction(number, value)
        raise InvalidTime(f"Time {value!r} is not a fraction of a day")
    if not isinstance(value, str):
        raise InvalidTime(f"Unsupported time value {value!r}")

    text = value.strip()
    if not text:
        return None
    match = _HH_MM.match(text)
    if match:
        return _format(int(match.group(1)), int(match.group(2)), value)
    match = _AM_PM.match(text)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2) or 0)
        if not 1 <= hours <= 12:
            raise InvalidTime(f"Time {value!r} is out of range")
        meridiem = match.group(3).upper()
        if meridiem == "PM" and hours != 12:
            hours += 12
        if meridiem == "AM" and hours == 12:
            hours = 0
        return _format(hours, minutes, value)
    try:
        number = float(text)
    except ValueError:
        raise InvalidTime(f"Time {value!r} is not recognised") from None
    if 0 <= number < 1:
        return _from_fraction(number, value)
    raise InvalidTime(f"Time {value!r} is not recognised")


def parse_sheet_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return default if text == "" else False
    raise ValueError(f"Cannot interpret {value!r} as a boolean")


def parse_sheet_date(value: Any) -> Any:
    """Accept ISO dates, ``M/D/YYYY`` and ISO timestamps."""

    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, str):
        return value
    text = value.strip()
    match = _US_DATE.match(text)
    if match:
        month, day, year = (int(part) for part in match.groups())
        return dt.date(year, month, day)
    if "T" in text:
        return text.split("T", 1)[0]
    return text


def parse_sheet_money(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip().replace("$", "").replace(",", "")
        if not text:
            return None
        try:
            return Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Cannot interpret {value!r} as an amount") from None
    return value


def _drop_blanks(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    return {
        key: value
        for key, value in data.items()
        if not (isinstance(value, str) and not value.strip())
    }


def _lower_enum(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower().replace("-", "_") or None
    return value


class SheetRecord(BaseModel):
    """Base for sheet rows: unknown columns ignored, blank cells dropped."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _blanks(cls, data: Any) -> Any:
        return _drop_blanks(data)


class ReservationRecord(SheetRecord):
    booking_id: str
    group_id: str | None = None
    date: dt.date
    court: int
    time_start: str
    time_end: str
    booking_type: ReservationType
    entity_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_amount: Decimal = Decimal("0.00")
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    participant_count: int | None = None
    is_youth: bool = False
    status: ReservationStatus = ReservationStatus.ACTIVE
    created_by: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    checked_in: bool = False
    checked_in_by: str | None = None
    checked_in_at: datetime | None = None
    cancel_reason: CancelReason | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    refund_status: RefundStatus | None = None
    refund_amount: Decimal | None = None
    refund_note: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, value: Any) -> Any:
        return parse_sheet_date(value)

    @field_validator("time_start", "time_end", mode="before")
    @classmethod
    def _times(cls, value: Any) -> Any:
        return normalize_time(value)

    @field_validator("is_youth", "checked_in", mode="before")
    @classmethod
    def _flags(cls, value: Any) -> bool:
        return parse_sheet_bool(value)

    @field_validator(
        "booking_type",
        "payment_status",
        "payment_method",
        "status",
        "cancel_reason",
        "refund_status",
        mode="before",
    )
    @classmethod
    def _enums(cls, value: Any) -> Any:
        return _lower_enum(value)

    @field_validator("payment_amount", mode="before")
    @classmethod
    def _payment(cls, value: Any) -> Any:
        amount = parse_sheet_money(value)
        return Decimal("0.00") if amount is None else amount

    @field_validator("refund_amount", mode="before")
    @classmethod
    def _refund(cls, value: Any) -> Any:
        return parse_sheet_money(value)

    @field_validator("booking_id", "entity_id", "customer_phone", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value


class ClosureRecord(SheetRecord):
    closure_id: str | None = None
    date: dt.date
    court: str = ALL_COURTS
    time_start: str | None = None
    time_end: str | None = None
    reason: str | None = None
    is_active: bool = True

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, value: Any) -> Any:
        return parse_sheet_date(value)

    @field_validator("court", mode="before")
    @classmethod
    def _court(cls, value: Any) -> str:
        if value is None:
            return ALL_COURTS
        text = str(value).strip().lower()
        if text == ALL_COURTS:
            return ALL_COURTS
        if not text.isdigit():
            raise ValueError(f"Closure court {value!r} must be a number or 'all'")
        return str(int(text))

    @field_validator("time_start", "time_end", mode="before")
    @classmethod
    def _times(cls, value: Any) -> Any:
        return normalize_time(value)

    @field_validator("is_active", mode="before")
    @classmethod
    def _active(cls, value: Any) -> bool:
        return parse_sheet_bool(value, default=True)


class CourtRecord(SheetRecord):
    court_number: int
    court_name: str
    display_order: int = 0
    status: CourtStatus = CourtStatus.OPEN

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> Any:
        return _lower_enum(value) or CourtStatus.OPEN


class _RatedRecord(SheetRecord):
    court_rate: Decimal = Decimal("0.00")

    @field_validator("court_rate", mode="before")
    @classmethod
    def _rate(cls, value: Any) -> Any:
        amount = parse_sheet_money(value)
        return Decimal("0.00") if amount is None else amount


class TeamRecord(_RatedRecord):
    team_id: str
    team_name: str = Field(validation_alias=AliasChoices("team_name", "name"))
    team_type: str
    contact_name: str | None = None
    contact_phone: str | None = Field(
        default=None, validation_alias=AliasChoices("contact_phone", "phone")
    )
    season_start: dt.date | None = None
    season_end: dt.date | None = None

    @field_validator("season_start", "season_end", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> Any:
        return parse_sheet_date(value)

    @field_validator("team_type", mode="before")
    @classmethod
    def _type(cls, value: Any) -> Any:
        return _lower_enum(value)

    @property
    def entity_id(self) -> str:
        return self.team_id

    @property
    def display_name(self) -> str:
        return self.team_name


class ContractorRecord(_RatedRecord):
    contractor_id: str
    name: str
    phone: str | None = None

    @property
    def entity_id(self) -> str:
        return self.contractor_id

    @property
    def display_name(self) -> str:
        return self.name


class TournamentRecord(_RatedRecord):
    tournament_id: str
    name: str
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    default_courts: list[int] = Field(default_factory=list)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> Any:
        return parse_sheet_date(value)

    @field_validator("default_courts", mode="before")
    @classmethod
    def _courts(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return [int(value)]
        if isinstance(value, str):
            return [int(part) for part in value.split(",") if part.strip()]
        return value

    @property
    def entity_id(self) -> str:
        return self.tournament_id

    @property
    def display_name(self) -> str:
        return self.name

    def default_court_numbers(self) -> list[int]:
        return list(self.default_courts)
