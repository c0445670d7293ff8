from datetime import date, time, timezone
from uuid import uuid4

import pytest

from homeboard.core.exceptions import ValidationError
from homeboard.schemas.schedule import TimeBlockIn
from homeboard.services.schedule_service import ScheduleService, validate_blocks
from homeboard.utils.week import DAY_NAMES

WEEK = "2024-W05"


def block(start=None, end=None, label="", all_day=False):
    return TimeBlockIn(
        start=time.fromisoformat(start) if start else None,
        end=time.fromisoformat(end) if end else None,
        label=label,
        all_day=all_day,
    )


def spans(records):
    return [(r.start_time.strftime("%H:%M"), r.end_time.strftime("%H:%M"), r.label) for r in records]


class TestValidateBlocks:
    def test_touching_blocks_are_allowed(self):
        validate_blocks([block("10:00", "11:00"), block("09:00", "10:00")])

    def test_overlap_names_both_blocks(self):
        with pytest.raises(ValidationError) as exc:
            validate_blocks([block("09:00", "12:00", "Work"), block("11:00", "13:00", "Lunch")])
        assert "overlaps" in exc.value.message
        assert "Work" in exc.value.message
        assert "Lunch" in exc.value.message

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError):
            validate_blocks([block("10:00", "10:00")])
        with pytest.raises(ValidationError):
            validate_blocks([block("18:00", "09:00")])

    def test_timed_block_needs_both_times(self):
        with pytest.raises(ValidationError):
            validate_blocks([block("09:00", None, "Work")])

    def test_times_with_a_timezone_are_rejected(self):
        aware = TimeBlockIn(start=time(9, 0, tzinfo=timezone.utc), end=time(10, 0))
        with pytest.raises(ValidationError) as exc:
            validate_blocks([block("08:00", "09:00"), aware])
        assert "timezone" in exc.value.message

    def test_times_must_be_whole_minutes(self):
        with pytest.raises(ValidationError):
            validate_blocks([block("09:00:10", "09:00:50")])
        with pytest.raises(ValidationError):
            validate_blocks([TimeBlockIn(start=time(9, 0, 0, 500), end=time(10, 0))])

    def test_all_day_blocks_skip_overlap_check(self):
        validate_blocks([block(label="Day off", all_day=True), block("09:00", "17:00")])


class TestScheduleService:
    async def test_empty_week_has_seven_empty_days(self, db):
        week = await ScheduleService(db).get_week(5, WEEK)
        assert list(week) == list(DAY_NAMES)
        assert all(blocks == [] for blocks in week.values())

    async def test_replace_day_then_get_week(self, db):
        service = ScheduleService(db)
        week = await service.replace_day(5, WEEK, "Monday", [block("09:00", "17:00", "Work")])

        assert spans(week["Monday"]) == [("09:00", "17:00", "Work")]
        assert week["Monday"][0].schedule_date == date(2024, 1, 29)
        assert all(week[day] == [] for day in DAY_NAMES if day != "Monday")

    async def test_replace_day_replaces_everything_in_the_slot(self, db):
        service = ScheduleService(db)
        first = await service.replace_day(5, WEEK, "Monday", [block("09:00", "17:00", "Work")])
        old_id = first["Monday"][0].id

        week = await service.replace_day(
            5, WEEK, "Monday", [block("18:00", "19:00", "Gym"), block("07:00", "08:00", "Run")]
        )
        assert spans(week["Monday"]) == [("07:00", "08:00", "Run"), ("18:00", "19:00", "Gym")]
        assert old_id not in {r.id for r in week["Monday"]}

    async def test_supplied_block_ids_are_not_reused(self, db):
        supplied = uuid4()
        incoming = TimeBlockIn(id=supplied, start=time(9), end=time(10), label="Call")
        week = await ScheduleService(db).replace_day(5, WEEK, "Tuesday", [incoming])
        assert week["Tuesday"][0].id != supplied

    async def test_rejected_replace_leaves_slot_untouched(self, db):
        service = ScheduleService(db)
        await service.replace_day(5, WEEK, "Monday", [block("09:00", "17:00", "Work")])

        with pytest.raises(ValidationError):
            await service.replace_day(
                5, WEEK, "Monday", [block("09:00", "12:00"), block("11:00", "13:00")]
            )

        assert spans(await service.get_day(5, WEEK, "Monday")) == [("09:00", "17:00", "Work")]

    async def test_empty_list_clears_the_day(self, db):
        service = ScheduleService(db)
        await service.replace_day(5, WEEK, "Friday", [block("09:00", "17:00")])
        week = await service.replace_day(5, WEEK, "Friday", [])
        assert week["Friday"] == []

    async def test_all_day_blocks_span_the_day_and_sort_first(self, db):
        week = await ScheduleService(db).replace_day(
            5, WEEK, "Saturday", [block("08:00", "09:00", "Run"), block(label="Out of town", all_day=True)]
        )
        first, second = week["Saturday"]
        assert first.all_day
        assert (first.start_time, first.end_time) == (time(0, 0), time(23, 59))
        assert second.label == "Run"

    async def test_other_slots_are_independent(self, db):
        service = ScheduleService(db)
        await service.replace_day(1, WEEK, "Monday", [block("16:00", "23:00", "Work")])
        await service.replace_day(5, WEEK, "Tuesday", [block("09:00", "17:00", "Work")])
        await service.replace_day(5, "2024-W06", "Monday", [block("10:00", "11:00")])

        await service.replace_day(5, WEEK, "Monday", [block("09:00", "17:00", "Work")])

        assert spans(await service.get_day(1, WEEK, "Monday")) == [("16:00", "23:00", "Work")]
        assert len(await service.get_day(5, WEEK, "Tuesday")) == 1
        assert len(await service.get_day(5, "2024-W06", "Monday")) == 1

    async def test_day_names_are_case_insensitive(self, db):
        service = ScheduleService(db)
        await service.replace_day(5, WEEK, "wednesday", [block("09:00", "10:00")])
        week = await service.get_week(5, WEEK)
        assert len(week["Wednesday"]) == 1

    async def test_invalid_week_key_or_day(self, db):
        service = ScheduleService(db)
        with pytest.raises(ValidationError):
            await service.get_week(5, "2024-5")
        with pytest.raises(ValidationError):
            await service.replace_day(5, WEEK, "Someday", [])

    async def test_delete_block(self, db):
        service = ScheduleService(db)
        week = await service.replace_day(
            5, WEEK, "Monday", [block("07:00", "08:00", "Run"), block("09:00", "17:00", "Work")]
        )
        run_id = week["Monday"][0].id

        assert await service.delete_block(5, WEEK, "Monday", run_id) is True
        assert spans(await service.get_day(5, WEEK, "Monday")) == [("09:00", "17:00", "Work")]
        assert await service.delete_block(5, WEEK, "Monday", run_id) is False
        assert await service.delete_block(5, WEEK, "Monday", uuid4()) is False

    async def test_delete_block_requires_matching_slot(self, db):
        service = ScheduleService(db)
        week = await service.replace_day(5, WEEK, "Monday", [block("09:00", "17:00")])
        block_id = week["Monday"][0].id

        assert await service.delete_block(5, WEEK, "Tuesday", block_id) is False
        assert await service.delete_block(1, WEEK, "Monday", block_id) is False
        assert len(await service.get_day(5, WEEK, "Monday")) == 1

    async def test_household_week_includes_every_member(self, db):
        service = ScheduleService(db)
        await service.replace_day(2, WEEK, "Thursday", [block("10:00", "19:45", "Work")])

        household = await service.get_household_week(WEEK)
        assert set(household) == {1, 2, 3, 5}
        assert spans(household[2]["Thursday"]) == [("10:00", "19:45", "Work")]
        assert all(blocks == [] for blocks in household[1].values())
