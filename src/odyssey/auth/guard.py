"""Authorization guard — who may do what to which resource.

Learn: every ownership/visibility rule in the app lives in the _RULES
table below, keyed by (resource kind, action). Services build a small
immutable reference for the resource and ask the guard; they never
compare owner ids themselves. A (kind, action) pair missing from the
table is denied.

| Resource | Action        | Allowed when                                  |
|----------|---------------|-----------------------------------------------|
| journal  | read          | journal is public, or principal owns it       |
| journal  | update/delete | principal owns the journal                    |
| comment  | create        | principal can read the journal                |
| comment  | delete        | principal wrote the comment or owns journal   |
| reaction | create        | principal can read the journal                |
| reaction | delete        | principal left the reaction                   |

The guard is pure: no I/O, no state. `principal` is a user id, or None
for an anonymous request (which can only read public journals).

It only ever answers allow/deny. Turning a denial on a private journal
into a 404 instead of a 403 is the caller's job (see
services/access.py), so the existence of private journals never leaks.
"""

import enum
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Union

from odyssey.db.models import Comment, Journal, Reaction
from odyssey.errors import Forbidden

Principal = Optional[uuid.UUID]


class Action(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# ─── Resource references ─────────────────────────────────


@dataclass(frozen=True)
class JournalRef:
    id: Optional[uuid.UUID]
    owner_id: uuid.UUID
    is_public: bool

    @classmethod
    def of(cls, journal: Journal) -> "JournalRef":
        return cls(id=journal.id, owner_id=journal.user_id, is_public=journal.is_public)


@dataclass(frozen=True)
class CommentRef:
    author_id: uuid.UUID
    journal: JournalRef
    id: Optional[uuid.UUID] = None

    @classmethod
    def of(cls, comment: Comment, journal: Journal) -> "CommentRef":
        return cls(
            id=comment.id, author_id=comment.user_id, journal=JournalRef.of(journal)
        )


@dataclass(frozen=True)
class ReactionRef:
    owner_id: uuid.UUID
    journal: JournalRef
    id: Optional[uuid.UUID] = None

    @classmethod
    def of(cls, reaction: Reaction, journal: Journal) -> "ReactionRef":
        return cls(
            id=reaction.id, owner_id=reaction.user_id, journal=JournalRef.of(journal)
        )


Resource = Union[JournalRef, CommentRef, ReactionRef]


# ─── Rules ───────────────────────────────────────────────


def _owns_journal(principal: Principal, journal: JournalRef) -> bool:
    return principal is not None and principal == journal.owner_id


def _can_read_journal(principal: Principal, journal: JournalRef) -> bool:
    return journal.is_public or _owns_journal(principal, journal)


def _can_delete_comment(principal: Principal, comment: CommentRef) -> bool:
    if principal is None:
        return False
    return principal == comment.author_id or _owns_journal(principal, comment.journal)


def _can_delete_reaction(principal: Principal, reaction: ReactionRef) -> bool:
    return principal is not None and principal == reaction.owner_id


def _requires_principal(rule: Callable) -> Callable:
    def checked(principal: Principal, resource) -> bool:
        return principal is not None and rule(principal, resource)
    return checked


_RULES: dict[tuple[type, Action], Callable[[Principal, Resource], bool]] = {
    (JournalRef, Action.READ): _can_read_journal,
    (JournalRef, Action.UPDATE): _owns_journal,
    (JournalRef, Action.DELETE): _owns_journal,
    (CommentRef, Action.CREATE): _requires_principal(
        lambda p, c: _can_read_journal(p, c.journal)
    ),
    (CommentRef, Action.DELETE): _can_delete_comment,
    (ReactionRef, Action.CREATE): _requires_principal(
        lambda p, r: _can_read_journal(p, r.journal)
    ),
    (ReactionRef, Action.DELETE): _can_delete_reaction,
}


def is_allowed(principal: Principal, resource: Resource, action: Action) -> bool:
    """Decide (principal, resource, action). Unknown combinations are denied."""
    rule = _RULES.get((type(resource), action))
    if rule is None:
        return False
    return rule(principal, resource)


def authorize(principal: Principal, resource: Resource, action: Action) -> None:
    """Raise Forbidden unless the action is allowed."""
    if not is_allowed(principal, resource, action):
        raise Forbidden()
