"""Common Pydantic models for API request/response validation."""

from typing import Optional, Literal

from pydantic import BaseModel

LookbackName = Literal["3_months", "6_months", "1_year", "all"]
RangeName = Literal["1_day", "1_week", "1_month", "3_months", "1_year", "all"]
GranularityName = Literal["hour", "day", "week", "month"]

# Query-string patterns for the same vocabularies
LOOKBACK_PATTERN = "^(3_months|6_months|1_year|all)$"
RANGE_PATTERN = "^(1_day|1_week|1_month|3_months|1_year|all)$"
GRANULARITY_PATTERN = "^(hour|day|week|month)$"


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
