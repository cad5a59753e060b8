"""Authorization guard tests — the (resource, action) rule table."""

import uuid

import pytest

from odyssey.auth.guard import (
    Action,
    CommentRef,
    JournalRef,
    ReactionRef,
    authorize,
    is_allowed,
)
from odyssey.errors import Forbidden

OWNER = uuid.uuid4()
AUTHOR = uuid.uuid4()
STRANGER = uuid.uuid4()


def journal(is_public: bool) -> JournalRef:
    return JournalRef(id=uuid.uuid4(), owner_id=OWNER, is_public=is_public)


# ═══════════════════════════════════════════════════════════
# Journals
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize("principal", [OWNER, STRANGER, None])
def test_public_journal_readable_by_anyone(principal):
    assert is_allowed(principal, journal(True), Action.READ)


def test_private_journal_readable_only_by_owner():
    j = journal(False)
    assert is_allowed(OWNER, j, Action.READ)
    assert not is_allowed(STRANGER, j, Action.READ)
    assert not is_allowed(None, j, Action.READ)


@pytest.mark.parametrize("action", [Action.UPDATE, Action.DELETE])
@pytest.mark.parametrize("is_public", [True, False])
def test_only_owner_may_modify_journal(action, is_public):
    j = journal(is_public)
    assert is_allowed(OWNER, j, action)
    assert not is_allowed(STRANGER, j, action)
    assert not is_allowed(None, j, action)


def test_unknown_action_is_denied():
    assert not is_allowed(OWNER, journal(True), Action.CREATE)


# ═══════════════════════════════════════════════════════════
# Comments
# ═══════════════════════════════════════════════════════════


def test_comment_create_follows_journal_readability():
    assert is_allowed(STRANGER, CommentRef(author_id=STRANGER, journal=journal(True)), Action.CREATE)
    assert not is_allowed(STRANGER, CommentRef(author_id=STRANGER, journal=journal(False)), Action.CREATE)
    assert is_allowed(OWNER, CommentRef(author_id=OWNER, journal=journal(False)), Action.CREATE)


def test_anonymous_cannot_comment_even_on_public_journal():
    assert not is_allowed(None, CommentRef(author_id=STRANGER, journal=journal(True)), Action.CREATE)


@pytest.mark.parametrize(
    "principal, allowed",
    [(AUTHOR, True), (OWNER, True), (STRANGER, False), (None, False)],
    ids=["author", "journal-owner", "third-party", "anonymous"],
)
@pytest.mark.parametrize("is_public", [True, False])
def test_comment_delete_roles(principal, allowed, is_public):
    comment = CommentRef(author_id=AUTHOR, journal=journal(is_public))
    assert is_allowed(principal, comment, Action.DELETE) is allowed


def test_comment_update_is_not_a_rule():
    comment = CommentRef(author_id=AUTHOR, journal=journal(True))
    assert not is_allowed(AUTHOR, comment, Action.UPDATE)


# ═══════════════════════════════════════════════════════════
# Reactions
# ═══════════════════════════════════════════════════════════


def test_reaction_create_follows_journal_readability():
    assert is_allowed(STRANGER, ReactionRef(owner_id=STRANGER, journal=journal(True)), Action.CREATE)
    assert not is_allowed(STRANGER, ReactionRef(owner_id=STRANGER, journal=journal(False)), Action.CREATE)


def test_reaction_delete_only_by_its_owner():
    reaction = ReactionRef(owner_id=AUTHOR, journal=journal(True))
    assert is_allowed(AUTHOR, reaction, Action.DELETE)
    # Owning the journal does not let you remove other people's reactions.
    assert not is_allowed(OWNER, reaction, Action.DELETE)
    assert not is_allowed(STRANGER, reaction, Action.DELETE)


# ═══════════════════════════════════════════════════════════
# authorize()
# ═══════════════════════════════════════════════════════════


def test_authorize_raises_forbidden_on_denial():
    with pytest.raises(Forbidden):
        authorize(STRANGER, journal(False), Action.READ)


def test_authorize_returns_none_on_allow():
    assert authorize(OWNER, journal(False), Action.DELETE) is None
