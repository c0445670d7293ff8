import asyncio
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
import pytest_asyncio

from homeboard.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from homeboard.db.database import build_engine, create_tables, session_factory
from homeboard.models import DEFAULT_USERS, User
from homeboard.services.message_service import MessageService
from homeboard.services.unread_service import UnreadTracker


async def test_post_strips_and_stores_content(db):
    message = await MessageService(db).post(1, "  Dinner at 7  ")
    assert message.content == "Dinner at 7"
    assert message.sender_id == 1
    assert message.deleted_at is None
    assert message.created_at is not None


@pytest.mark.parametrize("content", [None, "", "   \n\t"])
async def test_post_rejects_empty_content(db, content):
    with pytest.raises(ValidationError):
        await MessageService(db).post(1, content)


async def test_post_rejects_content_over_the_limit(db):
    service = MessageService(db, max_length=10)
    await service.post(1, "x" * 10)
    with pytest.raises(ValidationError):
        await service.post(1, "x" * 11)


async def test_list_active_is_newest_first_and_limited(db):
    service = MessageService(db)
    base = datetime(2024, 1, 29, 8, 0)
    for minutes, text in enumerate(["first", "second", "third"]):
        message = await service.post(1, text)
        message.created_at = base + timedelta(minutes=minutes)
    await db.flush()

    assert [m.content for m in await service.list_active()] == ["third", "second", "first"]
    assert [m.content for m in await service.list_active(limit=2)] == ["third", "second"]


async def test_end_to_end_read_and_delete(db):
    service = MessageService(db)
    tracker = UnreadTracker(db)

    message = await service.post(1, "Dinner at 7")
    assert await tracker.count_unread(2) == 1
    assert await tracker.count_unread(3) == 1

    assert await service.mark_read(message.id, 2) is True
    assert await tracker.count_unread(2) == 0
    assert await tracker.count_unread(3) == 1

    with pytest.raises(AuthorizationError):
        await service.soft_delete(message.id, 2)
    assert await tracker.count_unread(3) == 1

    assert await service.soft_delete(message.id, 1) is True
    assert await tracker.count_unread(3) == 0
    assert await service.list_active() == []

    reads = await service.list_reads(message.id)
    assert [read.user_id for read in reads] == [2]


async def test_mark_read_is_idempotent(db):
    service = MessageService(db)
    tracker = UnreadTracker(db)
    message = await service.post(1, "Bins go out tonight")

    assert await service.mark_read(message.id, 3) is True
    assert await service.mark_read(message.id, 3) is True

    assert len(await service.list_reads(message.id)) == 1
    assert await tracker.count_unread(3) == 0


async def test_own_messages_count_as_unread(db):
    service = MessageService(db)
    tracker = UnreadTracker(db)
    message = await service.post(1, "Note to self")

    assert await tracker.count_unread(1) == 1
    await service.mark_read(message.id, 1)
    assert await tracker.count_unread(1) == 0


async def test_mark_read_on_missing_or_deleted_message(db):
    service = MessageService(db)
    with pytest.raises(NotFoundError):
        await service.mark_read(uuid4(), 2)

    message = await service.post(1, "Gone soon")
    await service.soft_delete(message.id, 1)
    with pytest.raises(NotFoundError):
        await service.mark_read(message.id, 2)


async def test_soft_delete_outcomes(db):
    service = MessageService(db)
    message = await service.post(1, "Parcel on the porch")

    assert await service.soft_delete(uuid4(), 1) is False
    assert await service.soft_delete(message.id, 1) is True
    assert await service.soft_delete(message.id, 1) is False
    # Already deleted wins over the sender check
    assert await service.soft_delete(message.id, 2) is False

    stored = await service.get_message(message.id)
    assert stored is not None
    assert stored.deleted_at is not None


async def test_list_active_loads_sender_and_receipts(db):
    service = MessageService(db)
    message = await service.post(2, "Out until Sunday")
    await service.mark_read(message.id, 3)

    [listed] = await service.list_active()
    assert listed.sender.name == "Narumi"
    assert [read.user.name for read in listed.reads] == ["John"]
    assert MessageService.is_read_by(listed, 3) is True
    assert MessageService.is_read_by(listed, 1) is False
    assert MessageService.is_read_by(listed, None) is None


async def test_unread_count_ignores_deleted_messages(db):
    service = MessageService(db)
    tracker = UnreadTracker(db)
    keep = await service.post(1, "Keep")
    drop = await service.post(2, "Drop")
    await service.soft_delete(drop.id, 2)

    assert await tracker.count_unread(3) == 1
    await service.mark_read(keep.id, 3)
    assert await tracker.count_unread(3) == 0


@pytest_asyncio.fixture
async def file_sessions(tmp_path):
    """Sessions on separate connections to one on-disk database."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'board.db'}")
    await create_tables(engine)
    maker = session_factory(engine)
    async with maker() as session:
        session.add_all([User(**cfg) for cfg in DEFAULT_USERS])
        await session.commit()
    yield maker
    await engine.dispose()


async def test_concurrent_mark_read_leaves_one_receipt(file_sessions):
    async with file_sessions() as session:
        message = await MessageService(session).post(1, "Dinner at 7")
        await session.commit()

    async def mark():
        async with file_sessions() as session:
            result = await MessageService(session).mark_read(message.id, 2)
            await session.commit()
            return result

    assert await asyncio.gather(mark(), mark()) == [True, True]

    async with file_sessions() as session:
        assert len(await MessageService(session).list_reads(message.id)) == 1
        assert await UnreadTracker(session).count_unread(2) == 0


async def test_concurrent_soft_delete_succeeds_once(file_sessions):
    async with file_sessions() as session:
        message = await MessageService(session).post(1, "Parcel on the porch")
        await session.commit()

    async def delete():
        async with file_sessions() as session:
            result = await MessageService(session).soft_delete(message.id, 1)
            await session.commit()
            return result

    assert sorted(await asyncio.gather(delete(), delete())) == [False, True]
