import pytest

from homeboard.core.exceptions import UnknownUserError
from homeboard.models.user import User
from homeboard.services.user_service import UserService


async def test_list_users_is_ordered_by_id(db):
    users = await UserService.list_users(db)
    assert [u.id for u in users] == [1, 2, 3, 5]
    assert [u.name for u in users[:3]] == ["Riko", "Narumi", "John"]


async def test_require_user(db):
    assert (await UserService.require_user(db, 2)).name == "Narumi"
    with pytest.raises(UnknownUserError):
        await UserService.require_user(db, 42)


async def test_seed_is_a_no_op_when_users_exist(db):
    users = await UserService.seed_default_users(db)
    assert len(users) == 4


async def test_seed_creates_default_household(session_maker):
    async with session_maker() as session:
        users = await UserService.seed_default_users(session)
        await session.commit()
        assert [u.name for u in users] == ["Riko", "Narumi", "John"]
        assert all(isinstance(u, User) for u in users)
