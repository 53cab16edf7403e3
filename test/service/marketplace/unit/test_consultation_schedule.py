from datetime import date, time, timedelta

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.marketplace.domain import consultation_schedule


def _next_weekday() -> date:
    day = consultation_schedule.today() + timedelta(days=2)
    while consultation_schedule.is_weekend(day):
        day += timedelta(days=1)
    return day


def _next_saturday() -> date:
    day = consultation_schedule.today() + timedelta(days=1)
    while day.weekday() != 5:
        day += timedelta(days=1)
    return day


@pytest.mark.unit
class TestSlots:
    def test_twelve_hourly_slots(self):
        slots = [consultation_schedule.format_slot(s) for s in consultation_schedule.SLOT_TIMES]

        assert len(slots) == 12
        assert slots[0] == '09:00'
        assert slots[-1] == '20:00'

    @pytest.mark.parametrize('value', ['09:00', '13:00', '20:00'])
    def test_parse_valid_slot(self, value: str):
        parsed = consultation_schedule.parse_slot(value)

        assert consultation_schedule.format_slot(parsed) == value

    @pytest.mark.parametrize('value', ['08:00', '08:30', '21:00', '10:15', 'noon'])
    def test_parse_invalid_slot(self, value: str):
        with pytest.raises(DomainError) as exc_info:
            consultation_schedule.parse_slot(value)

        assert exc_info.value.message == f'INVALID_TIME_SLOT: {value}'

    def test_end_of_is_one_hour_later(self):
        assert consultation_schedule.end_of(time(19)) == time(20)
        assert consultation_schedule.end_of(time(20)) == time(21)

    def test_last_slot_cannot_start_a_reservation(self):
        consultation_schedule.validate_reservation_start(time(19))

        with pytest.raises(DomainError) as exc_info:
            consultation_schedule.validate_reservation_start(time(20))

        assert exc_info.value.message == 'INVALID_RESERVATION_TIME'


@pytest.mark.unit
class TestReservationDate:
    def test_future_weekday_is_allowed(self):
        consultation_schedule.validate_reservation_date(_next_weekday())

    def test_today_is_closed(self):
        with pytest.raises(DomainError) as exc_info:
            consultation_schedule.validate_reservation_date(consultation_schedule.today())

        assert exc_info.value.message == 'PAST_DATE_NOT_ALLOWED'

    def test_weekend_is_closed(self):
        with pytest.raises(DomainError) as exc_info:
            consultation_schedule.validate_reservation_date(_next_saturday())

        assert exc_info.value.message == 'WEEKEND_NOT_ALLOWED'

    def test_is_weekend(self):
        assert consultation_schedule.is_weekend(date(2026, 10, 24)) is True
        assert consultation_schedule.is_weekend(date(2026, 10, 25)) is True
        assert consultation_schedule.is_weekend(date(2026, 10, 26)) is False

    def test_scheduled_at_carries_business_zone(self):
        scheduled = consultation_schedule.scheduled_at(date(2026, 10, 26), time(10))

        assert scheduled.tzinfo == consultation_schedule.business_zone()
        assert scheduled.isoformat().startswith('2026-10-26T10:00:00')
