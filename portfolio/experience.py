"""Years-of-experience figures shown on the site."""

from datetime import date, datetime
from typing import Optional, Union

CAREER_START = date(2014, 11, 26)
INTERNSHIP_YEARS = 0.5


def _as_date(now: Optional[Union[date, datetime]]) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def calculate_experience(now: Optional[Union[date, datetime]] = None) -> int:
    """Whole years elapsed since the career start date.

    The count only goes up once the anniversary has been reached in the
    current year. Dates before the start date still give a positive count.
    """
    today = _as_date(now)

    years = today.year - CAREER_START.year
    months = today.month - CAREER_START.month
    days = today.day - CAREER_START.day

    if months < 0 or (months == 0 and days < 0):
        years -= 1

    return abs(years)


def get_total_experience(now: Optional[Union[date, datetime]] = None) -> float:
    """Experience including the six month internship before the start date."""
    return calculate_experience(now) + INTERNSHIP_YEARS


def get_experience_text(now: Optional[Union[date, datetime]] = None) -> str:
    return f"{calculate_experience(now)}+ Years"
