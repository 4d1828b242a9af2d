# Intake & triage: urgency classification, location reconciliation and the
# single-row submission pipeline

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from grievance_portal import config
from grievance_portal.i18n import translate
from grievance_portal.models import (
    Category, GrievanceCreate, GrievanceRecord, GrievanceStatus, Language,
    LocationMethod, Urgency,
)
from grievance_portal.store import StoreWriteError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Urgency classification
# ---------------------------------------------------------------------------
# Checked in order; the first tier with any keyword present wins.
URGENCY_KEYWORDS: List[Tuple[Urgency, List[str]]] = [
    (Urgency.HIGH, [
        "urgent", "emergency", "danger", "critical", "immediate", "sick", "death", "injury",
        "dringend", "noodgeval", "gevaar",
    ]),
    (Urgency.MEDIUM, [
        "serious", "problem", "issue", "concern", "worried",
        "ernstig", "probleem", "bekommerd",
    ]),
]


class UrgencyClassifier:
    def __init__(self, tiers: Sequence[Tuple[Urgency, Sequence[str]]] = URGENCY_KEYWORDS,
                 default: Urgency = Urgency.LOW):
        self.tiers = [(level, [k.lower() for k in keywords]) for level, keywords in tiers]
        self.default = default

    def classify(self, text: str) -> Urgency:
        lowered = (text or "").lower()
        for level, keywords in self.tiers:
            if any(k in lowered for k in keywords):
                return level
        return self.default


_classifier = UrgencyClassifier()

def classify_urgency(text: str) -> Urgency:
    return _classifier.classify(text)

# ---------------------------------------------------------------------------
# Location reconciliation
# ---------------------------------------------------------------------------
class PositioningError(Exception):
    """Position capture was denied, unavailable, or the capability is absent."""


# Async callable standing in for the host's positioning capability
PositionProvider = Callable[[], Awaitable[Tuple[float, float]]]


class LocationStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ResolvedLocation:
    latitude: Optional[float]
    longitude: Optional[float]
    location_text: Optional[str]
    location_method: Optional[LocationMethod]


def _short_number(value: float) -> str:
    # -25.7461 stays as is, 28.0 prints as 28
    return str(int(value)) if float(value).is_integer() else repr(float(value))

def format_gps(latitude: float, longitude: float) -> str:
    return f"GPS: {_short_number(latitude)}, {_short_number(longitude)}"

def apply_captured_position(latitude: float, longitude: float) -> Tuple[float, float, str]:
    """Round a captured fix to 4 decimals (~11 m) and build the text shown in
    the single location input. The text replaces anything already typed."""
    lat = round(float(latitude), 4)
    lon = round(float(longitude), 4)
    return lat, lon, format_gps(lat, lon)

def resolve_location(latitude: Optional[float], longitude: Optional[float],
                     location_text: Optional[str]) -> ResolvedLocation:
    text = (location_text or "").strip() or None
    if latitude is not None and longitude is not None:
        lat, lon, gps_text = apply_captured_position(latitude, longitude)
        return ResolvedLocation(lat, lon, text or gps_text, LocationMethod.BROWSER_AUTO)
    if text:
        return ResolvedLocation(None, None, text, LocationMethod.MANUAL)
    return ResolvedLocation(None, None, None, None)

# ---------------------------------------------------------------------------
# Submission pipeline
# ---------------------------------------------------------------------------
class ErrorKind(str, Enum):
    VALIDATION = "validation"
    STORE_WRITE = "store_write"
    STORE_READ = "store_read"
    POSITIONING = "positioning"


@dataclass
class SubmissionResult:
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    row: Optional[Dict] = None
    record: Optional[GrievanceRecord] = None
    grievance_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None

def build_grievance(data: GrievanceCreate) -> SubmissionResult:
    """Validate the form payload and derive the row to insert. Never touches the store."""
    if not data.description.strip():
        return SubmissionResult(error=ErrorKind.VALIDATION,
                                message=translate(data.language, "validationMessage"))

    location = resolve_location(data.latitude, data.longitude, data.location_text)
    row = {
        "submitted_language": data.language.value,
        "submitter_name": _blank_to_none(data.name),
        "submitter_contact": _blank_to_none(data.contact),
        "location_text": location.location_text,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "location_method": location.location_method.value if location.location_method else None,
        "content": data.description.strip(),
        "category": (data.category or Category.OTHER).value,
        "urgency": classify_urgency(data.description).value,
        "status": GrievanceStatus.NEW.value,
    }
    return SubmissionResult(row=row)

async def submit_grievance(data: GrievanceCreate, store, table: str = config.GRIEVANCE_TABLE,
                           executor=None) -> SubmissionResult:
    """Build the record, insert exactly one row and compose the confirmation."""
    result = build_grievance(data)
    if not result.ok:
        return result

    loop = asyncio.get_running_loop()
    try:
        inserted = await loop.run_in_executor(executor, store.insert, table, [result.row])
    except StoreWriteError as e:
        logger.error("Error submitting grievance: %s", e)
        result.error = ErrorKind.STORE_WRITE
        result.message = translate(data.language, "submitError")
        return result

    if inserted:
        result.record = GrievanceRecord(**inserted[0])
        result.grievance_id = result.record.id
    result.message = f"{translate(data.language, 'successMessage')} {result.grievance_id or 'UNKNOWN'}"
    logger.info("Grievance %s stored (urgency=%s)", result.grievance_id, result.row["urgency"])
    return result

# ---------------------------------------------------------------------------
# Form state
# ---------------------------------------------------------------------------
@dataclass
class GrievanceForm:
    """State owned by one submission form instance.

    Only the owner mutates it; capture and submit are each limited to one
    in-flight call through ``location_status`` and ``is_submitting``.
    """
    language: Language = Language.ENGLISH
    name: str = ""
    contact: str = ""
    location_text: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: str = ""
    category: Optional[Category] = None
    location_status: LocationStatus = LocationStatus.IDLE
    is_submitting: bool = False
    validation_message: Optional[str] = None
    submit_error: Optional[str] = None
    submit_success: Optional[str] = None
    _timers: Dict[str, asyncio.TimerHandle] = field(default_factory=dict, repr=False)

    def reset_fields(self) -> None:
        self.name = ""
        self.contact = ""
        self.location_text = ""
        self.latitude = None
        self.longitude = None
        self.description = ""
        self.category = None
        self.location_status = LocationStatus.IDLE

    def to_payload(self) -> GrievanceCreate:
        return GrievanceCreate(
            language=self.language, name=self.name, contact=self.contact,
            location_text=self.location_text, latitude=self.latitude,
            longitude=self.longitude, description=self.description, category=self.category,
        )

    def _later(self, delay: float, callback: Callable[[], None]) -> None:
        # One pending timer per callback; a newer one replaces the older
        key = callback.__name__
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()

        def fire():
            self._timers.pop(key, None)
            callback()

        self._timers[key] = asyncio.get_running_loop().call_later(delay, fire)

    def _set_idle(self) -> None:
        self.location_status = LocationStatus.IDLE

    def _clear_success(self) -> None:
        self.submit_success = None

    def cancel_timers(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

    async def capture_location(self, provider: Optional[PositionProvider]) -> Optional[ErrorKind]:
        if self.location_status == LocationStatus.LOADING:
            return None
        if provider is None:
            self.location_status = LocationStatus.ERROR
            self._later(config.STATUS_RESET_SECONDS, self._set_idle)
            return ErrorKind.POSITIONING

        self.location_status = LocationStatus.LOADING
        try:
            latitude, longitude = await provider()
        except Exception as e:
            # Any provider failure, not only PositioningError, ends in the error status
            logger.info("Position capture failed: %r", e)
            self.location_status = LocationStatus.ERROR
            self._later(config.STATUS_RESET_SECONDS, self._set_idle)
            return ErrorKind.POSITIONING

        self.latitude, self.longitude, self.location_text = apply_captured_position(latitude, longitude)
        self.location_status = LocationStatus.SUCCESS
        self._later(config.STATUS_RESET_SECONDS, self._set_idle)
        return None

    async def submit(self, store, table: str = config.GRIEVANCE_TABLE,
                     executor=None) -> Optional[SubmissionResult]:
        """Run the pipeline for the current fields; ignored while a submission is pending."""
        if self.is_submitting:
            return None

        self.validation_message = None
        try:
            payload = self.to_payload()
        except ValidationError as e:
            logger.info("Rejected form payload: %s", e)
            self.submit_error = translate(self.language, "submitError")
            return SubmissionResult(error=ErrorKind.VALIDATION, message=self.submit_error)
        if not payload.description.strip():
            result = build_grievance(payload)
            self.validation_message = result.message
            return result

        self.is_submitting = True
        self.submit_error = None
        self.submit_success = None
        try:
            result = await submit_grievance(payload, store, table, executor)
        finally:
            self.is_submitting = False

        if result.ok:
            self.submit_success = result.message
            self.reset_fields()
            self._later(config.SUCCESS_RESET_SECONDS, self._clear_success)
        else:
            self.submit_error = result.message
        return result
