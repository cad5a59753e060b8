"""Service-layer tests — called directly, no HTTP in between.

Learn: services raise the errors.py taxonomy, so the same failures the
API maps to status codes can be asserted here as exceptions.
"""

import pytest
import pytest_asyncio
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from odyssey.auth.principal import resolve_and_validate, resolve_principal
from odyssey.db.models import Journal, Reaction, ReactionType
from odyssey.errors import (
    DuplicateIdentity,
    Forbidden,
    InvalidCredentials,
    NoCredential,
    NotFound,
    PrincipalNotFound,
    ValidationFailed,
)
from odyssey.schemas.journal import JournalCreate, JournalUpdate
from odyssey.services.auth_service import AuthService
from odyssey.services.comment_service import CommentService
from odyssey.services.journal_service import JournalService
from odyssey.services.reaction_service import ReactionService, parse_reaction_type

COOKIE = "odyssey-token"


# ═══════════════════════════════════════════════════════════
# Accounts
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_twice_is_duplicate(db_session):
    svc = AuthService(db_session)
    await svc.register("a@x.com", "A", "password_123")
    with pytest.raises(DuplicateIdentity):
        await svc.register("a@x.com", "Someone else", "other_password")


@pytest.mark.asyncio
async def test_password_is_hashed(db_session):
    user = await AuthService(db_session).register("a@x.com", "A", "password_123")
    assert user.password_hash != "password_123"
    assert user.password_hash.startswith("$2")


@pytest.mark.asyncio
async def test_authenticate(db_session):
    svc = AuthService(db_session)
    created = await svc.register("a@x.com", "A", "password_123")
    assert (await svc.authenticate("a@x.com", "password_123")).id == created.id

    with pytest.raises(InvalidCredentials):
        await svc.authenticate("a@x.com", "wrong")
    with pytest.raises(InvalidCredentials):
        await svc.authenticate("nobody@x.com", "password_123")


@pytest.mark.asyncio
async def test_resolve_principal(db_session):
    created = await AuthService(db_session).register("a@x.com", "A", "password_123")
    assert (await resolve_principal(db_session, "a@x.com")).id == created.id
    with pytest.raises(PrincipalNotFound):
        await resolve_principal(db_session, "A@x.com")


@pytest.mark.asyncio
async def test_pipeline_end_to_end(db_session, codec):
    created = await AuthService(db_session).register("a@x.com", "A", "password_123")
    token = codec.issue("a@x.com")

    user = await resolve_and_validate(
        {"Authorization": f"Bearer {token}"}, {}, db_session, codec, COOKIE
    )
    assert user.id == created.id

    user = await resolve_and_validate({}, {COOKIE: token}, db_session, codec, COOKIE)
    assert user.id == created.id

    with pytest.raises(NoCredential):
        await resolve_and_validate({}, {}, db_session, codec, COOKIE)


@pytest.mark.asyncio
async def test_update_profile_only_self(db_session):
    svc = AuthService(db_session)
    alice = await svc.register("alice@x.com", "Alice", "password_123")
    bob = await svc.register("bob@x.com", "Bob", "password_123")

    updated = await svc.update_profile(alice, alice.id, {"bio": "hi", "name": None})
    assert updated.bio == "hi"
    assert updated.name == "Alice"

    with pytest.raises(Forbidden):
        await svc.update_profile(alice, bob.id, {"bio": "pwned"})


# ═══════════════════════════════════════════════════════════
# Journals, comments, reactions
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_ownership_never_changes(db_session):
    accounts = AuthService(db_session)
    owner = await accounts.register("o@x.com", "O", "password_123")
    other = await accounts.register("x@x.com", "X", "password_123")
    svc = JournalService(db_session)
    journal = await svc.create(owner, JournalCreate(title="Trip", is_public=True))
    assert journal.user_id == owner.id

    # Extra fields such as user_id are not part of the update schema.
    update = JournalUpdate.model_validate(
        {"title": "Renamed", "is_public": False, "user_id": str(other.id)}
    )
    updated = await svc.update(owner, journal.id, update)
    assert updated.title == "Renamed"
    assert updated.user_id == owner.id

    with pytest.raises(NotFound):
        await svc.update(other, journal.id, update)
    assert (await svc.get(owner, journal.id)).user_id == owner.id


@pytest.mark.asyncio
async def test_private_journal_is_not_found_for_others(db_session):
    accounts = AuthService(db_session)
    owner = await accounts.register("o@x.com", "O", "password_123")
    other = await accounts.register("x@x.com", "X", "password_123")
    svc = JournalService(db_session)
    journal = await svc.create(owner, JournalCreate(title="Trip", is_public=False))

    assert (await svc.get(owner, journal.id)).id == journal.id
    with pytest.raises(NotFound):
        await svc.get(other, journal.id)
    with pytest.raises(NotFound):
        await svc.get(None, journal.id)
    with pytest.raises(NotFound):
        await CommentService(db_session).add(other, journal.id, "hello")


@pytest.mark.asyncio
async def test_reaction_add_twice_keeps_one(db_session):
    owner = await AuthService(db_session).register("o@x.com", "O", "password_123")
    journal = await JournalService(db_session).create(
        owner, JournalCreate(title="Trip", is_public=True)
    )
    svc = ReactionService(db_session)
    await svc.add(owner, journal.id, "like")
    summary = await svc.add(owner, journal.id, "LIKE")
    assert [(s.type, s.count) for s in summary] == [("like", 1)]


async def _public_journal(db_session):
    owner = await AuthService(db_session).register("o@x.com", "O", "password_123")
    journal = await JournalService(db_session).create(
        owner, JournalCreate(title="Trip", is_public=True)
    )
    return owner, journal


async def _reaction_rows(session, journal_id) -> int:
    return await session.scalar(
        select(func.count()).select_from(Reaction).where(Reaction.journal_id == journal_id)
    )


@pytest_asyncio.fixture()
async def foreign_keys(db_engine):
    """SQLite only enforces foreign keys when asked to."""
    if db_engine.dialect.name == "sqlite":
        async with db_engine.connect() as conn:
            await conn.exec_driver_sql("PRAGMA foreign_keys=ON")


@pytest.mark.asyncio
async def test_concurrent_duplicate_add_still_succeeds(db_session, monkeypatch):
    """Two adds racing past the existence check leave one row."""
    owner, journal = await _public_journal(db_session)
    journal_id = journal.id
    svc = ReactionService(db_session)
    await svc.add(owner, journal_id, "like")

    # The second add misses the first row on its fast-path check, as a
    # concurrent request would, and runs into the unique constraint.
    real_find = svc._find
    lookups = []

    async def stale_find(*args):
        lookups.append(args)
        if len(lookups) == 1:
            return None
        return await real_find(*args)

    monkeypatch.setattr(svc, "_find", stale_find)
    summary = await svc.add(owner, journal_id, "like")

    assert [(s.type, s.count) for s in summary] == [("like", 1)]
    assert len(lookups) == 2
    assert await _reaction_rows(db_session, journal_id) == 1


@pytest.mark.asyncio
async def test_add_on_journal_deleted_mid_request(
    foreign_keys, db_session, session_factory, monkeypatch
):
    owner, journal = await _public_journal(db_session)
    journal_id = journal.id
    svc = ReactionService(db_session)
    real_find = svc._find
    deleted = []

    async def find_then_delete(*args):
        if not deleted:
            async with session_factory() as other:
                await other.execute(delete(Journal).where(Journal.id == journal_id))
                await other.commit()
            deleted.append(True)
        return await real_find(*args)

    monkeypatch.setattr(svc, "_find", find_then_delete)
    with pytest.raises(NotFound):
        await svc.add(owner, journal_id, "like")
    assert await _reaction_rows(db_session, journal_id) == 0


@pytest.mark.asyncio
async def test_other_integrity_errors_propagate(db_session, monkeypatch):
    owner, journal = await _public_journal(db_session)
    svc = ReactionService(db_session)

    async def failing_commit():
        raise IntegrityError(
            "INSERT INTO reactions", {}, Exception("FOREIGN KEY constraint failed")
        )

    monkeypatch.setattr(db_session, "commit", failing_commit)
    with pytest.raises(IntegrityError):
        await svc.add(owner, journal.id, "like")


@pytest.mark.parametrize("raw", ["like", "LIKE", " Like "])
def test_parse_reaction_type(raw):
    assert parse_reaction_type(raw) is ReactionType.LIKE


def test_parse_unknown_reaction_type():
    with pytest.raises(ValidationFailed):
        parse_reaction_type("meh")
