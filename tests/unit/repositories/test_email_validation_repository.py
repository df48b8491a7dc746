"""SQLAlchemy token repository against an in-memory SQLite database."""

import uuid
from datetime import datetime, timezone

import pytest

from email_validation.domain.email_validation import EmailValidationToken
from email_validation.infrastructure.repositories import get_repositories
from tests.conftest import create_user_direct


@pytest.mark.asyncio
async def test_get_repositories_is_memoized_per_session(db_session):
    assert get_repositories(db_session) is get_repositories(db_session)


@pytest.mark.asyncio
async def test_add_and_get_by_id(db_session):
    user = await create_user_direct(db_session)
    repo = get_repositories(db_session)["email_validation_tokens"]

    token = await repo.add(EmailValidationToken(owner_id=user.id))
    found = await repo.get_by_id(token.id)

    assert found is not None
    assert found.id == token.id
    assert found.owner_id == user.id
    assert found.deleted_at is None
    assert found.validated is False
    assert await repo.get_by_id(str(uuid.uuid4())) is None


@pytest.mark.asyncio
async def test_list_active_by_owner_skips_superseded_and_other_owners(db_session):
    alice = await create_user_direct(db_session, "alice@example.com")
    bob = await create_user_direct(db_session, "bob@example.com")
    repo = get_repositories(db_session)["email_validation_tokens"]

    old = await repo.add(EmailValidationToken(owner_id=alice.id))
    old.supersede()
    await repo.update(old)
    current = await repo.add(EmailValidationToken(owner_id=alice.id))
    await repo.add(EmailValidationToken(owner_id=bob.id))

    active = await repo.list_active_by_owner(alice.id)

    assert [t.id for t in active] == [current.id]


@pytest.mark.asyncio
async def test_update_never_clears_or_rewrites_deleted_at(db_session):
    user = await create_user_direct(db_session)
    repo = get_repositories(db_session)["email_validation_tokens"]
    token = await repo.add(EmailValidationToken(owner_id=user.id))

    token.supersede(datetime(2024, 1, 1, tzinfo=timezone.utc))
    await repo.update(token)
    stored = await repo.get_by_id(token.id)
    first_deleted_at = stored.deleted_at

    token.deleted_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
    await repo.update(token)
    token.deleted_at = None
    await repo.update(token)

    stored = await repo.get_by_id(token.id)
    assert stored.deleted_at == first_deleted_at


@pytest.mark.asyncio
async def test_validated_flag_is_never_reset(db_session):
    user = await create_user_direct(db_session)
    repo = get_repositories(db_session)["email_validation_tokens"]
    token = await repo.add(EmailValidationToken(owner_id=user.id))

    assert await repo.any_validated_by_owner(user.id) is False
    token.mark_validated()
    await repo.update(token)
    assert await repo.any_validated_by_owner(user.id) is True

    token.validated = False
    await repo.update(token)
    assert (await repo.get_by_id(token.id)).validated is True


@pytest.mark.asyncio
async def test_any_validated_counts_superseded_tokens(db_session):
    user = await create_user_direct(db_session)
    repo = get_repositories(db_session)["email_validation_tokens"]
    token = await repo.add(EmailValidationToken(owner_id=user.id))
    token.mark_validated()
    token.supersede()
    await repo.update(token)

    assert await repo.any_validated_by_owner(user.id) is True
    assert await repo.list_active_by_owner(user.id) == []


@pytest.mark.asyncio
async def test_update_is_staged_until_commit(session_factory):
    async with session_factory() as session:
        user = await create_user_direct(session)
        repo = get_repositories(session)["email_validation_tokens"]
        token = await repo.add(EmailValidationToken(owner_id=user.id))

        token.supersede()
        await repo.update(token)
        assert await repo.list_active_by_owner(user.id) == []
        await repo.rollback()
        assert [t.id for t in await repo.list_active_by_owner(user.id)] == [token.id]

        token.mark_validated()
        await repo.update(token)
        await repo.commit()

    async with session_factory() as session:
        stored = await get_repositories(session)["email_validation_tokens"].get_by_id(token.id)
        assert stored.deleted_at is not None
        assert stored.validated is True
