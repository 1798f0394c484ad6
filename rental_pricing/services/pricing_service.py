"""Pricing calculation service - validates requests and prices stays."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from rental_pricing.models.pricing import (
    CalculationRequest,
    CalculationResult,
    ErrorCode,
    ErrorResponse,
    PricingOutcome,
    PricingResponse,
    Subject,
    SubjectScope,
)
from rental_pricing.services.override_lookup import OverrideLookup
from rental_pricing.services.pricing_calculator import calculate
from rental_pricing.services.repository import OverrideStore, SubjectResolver
from rental_pricing.utils.dates import (
    days_between,
    enumerate_nights,
    is_valid_date_format,
    parse_date,
)
from rental_pricing.utils.logger import calculation_context, get_logger

logger = get_logger(__name__)

MAX_RANGE_DAYS = 365
INTERNAL_ERROR_MESSAGE = "Internal server error"


# =============================================================================
# Exceptions
# =============================================================================


class PricingRequestError(Exception):
    """A calculation request that cannot be priced."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = 400,
        extra: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.extra = extra or {}

    def to_outcome(self) -> PricingOutcome:
        body = ErrorResponse(error=self.message, code=self.code, **self.extra)
        return PricingOutcome(
            status_code=self.status_code,
            body=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        )


# =============================================================================
# Validation
# =============================================================================


@dataclass
class ValidatedRequest:
    """Request parameters that passed validation."""

    subject_id: int
    start_date: date
    end_date: date
    nights: list[date] = field(default_factory=list)


def parse_subject_id(raw_id: Any) -> int | None:
    """Parse a positive integer id from a path parameter or int."""
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        return raw_id if raw_id > 0 else None
    if isinstance(raw_id, str):
        value = raw_id.strip()
        if value.isdecimal() and value.isascii():
            parsed = int(value)
            return parsed if parsed > 0 else None
    return None


def validate_request(
    scope: SubjectScope,
    raw_id: Any,
    start_date: str | None,
    end_date: str | None,
    max_range_days: int = MAX_RANGE_DAYS,
) -> ValidatedRequest:
    """
    Validate calculation parameters, first failing check wins.

    Raises:
        PricingRequestError: With the code of the failing check
    """
    subject_id = parse_subject_id(raw_id)
    if subject_id is None:
        raise PricingRequestError(
            ErrorCode.INVALID_ID, f"Valid {scope.value} ID is required"
        )

    if not start_date or not end_date:
        raise PricingRequestError(
            ErrorCode.MISSING_DATE_PARAMETERS,
            "Both startDate and endDate are required",
        )

    if not is_valid_date_format(start_date):
        raise PricingRequestError(
            ErrorCode.INVALID_START_DATE_FORMAT,
            "startDate must be in YYYY-MM-DD format",
        )

    if not is_valid_date_format(end_date):
        raise PricingRequestError(
            ErrorCode.INVALID_END_DATE_FORMAT,
            "endDate must be in YYYY-MM-DD format",
        )

    start = parse_date(start_date)
    end = parse_date(end_date)

    if start > end:
        raise PricingRequestError(
            ErrorCode.INVALID_DATE_RANGE,
            "startDate must be less than or equal to endDate",
        )

    if days_between(start, end) > max_range_days:
        raise PricingRequestError(
            ErrorCode.DATE_RANGE_TOO_LARGE,
            f"Date range cannot exceed {max_range_days} days",
        )

    return ValidatedRequest(
        subject_id=subject_id,
        start_date=start,
        end_date=end,
        nights=enumerate_nights(start, end),
    )


# =============================================================================
# Pricing Calculation Service
# =============================================================================


class PricingCalculationService:
    """
    Prices a stay for a room or a whole property.

    Flow:
    1. Validate id and dates
    2. Resolve the room or property (404 if missing)
    3. Load overrides in one batched lookup
    4. Classify each night and aggregate totals
    5. Reject ranges where every night is unavailable
    """

    def __init__(
        self,
        resolver: SubjectResolver,
        store: OverrideStore,
        max_range_days: int = MAX_RANGE_DAYS,
    ):
        """
        Initialize pricing service.

        Args:
            resolver: Room/property lookup
            store: Override store read by the lookup
            max_range_days: Longest span accepted between startDate and endDate
        """
        self.resolver = resolver
        self.lookup = OverrideLookup(store)
        self.max_range_days = max_range_days

    async def calculate_room_pricing(
        self,
        room_id: Any,
        start_date: str | None,
        end_date: str | None,
    ) -> PricingOutcome:
        """Price a stay in a single room."""
        return await self._calculate(SubjectScope.ROOM, room_id, start_date, end_date)

    async def calculate_property_pricing(
        self,
        property_id: Any,
        start_date: str | None,
        end_date: str | None,
    ) -> PricingOutcome:
        """Price a stay for a whole property."""
        return await self._calculate(
            SubjectScope.PROPERTY, property_id, start_date, end_date
        )

    async def _calculate(
        self,
        scope: SubjectScope,
        raw_id: Any,
        start_date: str | None,
        end_date: str | None,
    ) -> PricingOutcome:
        with calculation_context(scope.value, raw_id):
            return await self._run(scope, raw_id, start_date, end_date)

    async def _run(
        self,
        scope: SubjectScope,
        raw_id: Any,
        start_date: str | None,
        end_date: str | None,
    ) -> PricingOutcome:
        try:
            request = validate_request(
                scope, raw_id, start_date, end_date, self.max_range_days
            )
            subject = await self._resolve(scope, request.subject_id)
            result = await self._price(subject, request)

        except PricingRequestError as e:
            logger.info(
                "pricing_request_rejected",
                scope=scope.value,
                subject_id=str(raw_id),
                code=e.code.value,
                status_code=e.status_code,
            )
            return e.to_outcome()

        except Exception as e:
            logger.error(
                "pricing_calculation_failed",
                scope=scope.value,
                subject_id=str(raw_id),
                start_date=start_date,
                end_date=end_date,
                error=str(e),
                exc_info=True,
            )
            body = ErrorResponse(
                error=INTERNAL_ERROR_MESSAGE, code=ErrorCode.INTERNAL_ERROR
            )
            return PricingOutcome(
                status_code=500,
                body=body.model_dump(mode="json", by_alias=True, exclude_none=True),
            )

        logger.info(
            "pricing_calculated",
            scope=scope.value,
            subject_id=subject.id,
            nights=result.nights,
            total_price=result.total_price,
            unavailable_nights=result.breakdown.unavailable_nights,
        )

        response = PricingResponse(
            scope=scope,
            subject_id=subject.id,
            subject_name=subject.name,
            base_price_per_night=subject.base_price_per_night,
            start_date=request.start_date,
            end_date=request.end_date,
            nights=result.nights,
            breakdown=result.breakdown,
            pricing=result.pricing_details,
            total_price=result.total_price,
            average_price_per_night=result.average_price_per_night,
        )
        return PricingOutcome(
            status_code=200,
            body=response.model_dump(mode="json", by_alias=True),
        )

    async def _resolve(self, scope: SubjectScope, subject_id: int) -> Subject:
        if scope == SubjectScope.ROOM:
            subject = await self.resolver.get_room(subject_id)
        else:
            subject = await self.resolver.get_property(subject_id)

        if subject is None:
            raise PricingRequestError(
                ErrorCode.NOT_FOUND,
                f"{scope.value.capitalize()} not found",
                status_code=404,
            )
        return subject

    async def _price(
        self,
        subject: Subject,
        request: ValidatedRequest,
    ) -> CalculationResult:
        calculation = CalculationRequest(
            subject_id=subject.id,
            start_date=request.start_date,
            end_date=request.end_date,
            base_price_per_night=subject.base_price_per_night,
        )

        overrides = await self.lookup.load(
            subject, calculation.start_date, calculation.end_date
        )
        result = calculate(
            request.nights, calculation.base_price_per_night, overrides
        )

        if result.all_unavailable:
            raise PricingRequestError(
                ErrorCode.ALL_DATES_UNAVAILABLE,
                "All dates in the requested range are unavailable",
                extra={"unavailable_dates": result.breakdown.unavailable_dates},
            )

        return result
