"""
Consultation schedule rules

Consultations are one-hour sessions on weekdays. The day is split into
twelve hourly slots (09:00 ~ 20:00); a reservation may start at any slot
up to 19:00. All calendar checks use settings.TIMEZONE.
"""

from datetime import date, datetime, time, timedelta
from typing import List
from zoneinfo import ZoneInfo

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DomainError


SLOT_TIMES: List[time] = [time(hour=hour) for hour in range(9, 21)]
LAST_RESERVABLE_START = time(hour=19)
CONSULTATION_DURATION = timedelta(hours=1)


def business_zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def today() -> date:
    return datetime.now(business_zone()).date()


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def format_slot(slot: time) -> str:
    return slot.strftime('%H:%M')


def parse_slot(value: str) -> time:
    """Parse 'HH:MM' into one of the twelve slot times"""
    try:
        parsed = datetime.strptime(value, '%H:%M').time()
    except ValueError:
        raise DomainError(f'INVALID_TIME_SLOT: {value}')

    if parsed not in SLOT_TIMES:
        raise DomainError(f'INVALID_TIME_SLOT: {value}')
    return parsed


def validate_not_past(day: date) -> None:
    """Today and earlier are closed for booking and blocking"""
    if day <= today():
        raise DomainError('PAST_DATE_NOT_ALLOWED')


def validate_reservation_date(day: date) -> None:
    validate_not_past(day)
    if is_weekend(day):
        raise DomainError('WEEKEND_NOT_ALLOWED')


def validate_reservation_start(start: time) -> None:
    if start not in SLOT_TIMES or start > LAST_RESERVABLE_START:
        raise DomainError('INVALID_RESERVATION_TIME')


def end_of(start: time) -> time:
    return (datetime.combine(date.min, start) + CONSULTATION_DURATION).time()


def scheduled_at(day: date, start: time) -> datetime:
    return datetime.combine(day, start, tzinfo=business_zone())
