import pytest

from email_validation.infrastructure.repositories import get_repositories
from tests.conftest import create_user_direct


@pytest.mark.asyncio
async def test_create_and_lookup_user(db_session):
    created = await create_user_direct(db_session, "ada@example.com", first_name="Ada")
    users = get_repositories(db_session)["users"]

    by_id = await users.get_by_id(created.id)
    by_email = await users.get_by_email("ada@example.com")

    assert by_id.email == "ada@example.com"
    assert by_id.display_name == "Ada"
    assert by_email.id == created.id
    assert await users.get_by_id(created.id + 1000) is None
