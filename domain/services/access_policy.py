"""Document access policy.

A single precedence table decides who may read, share and manage a document.
Every caller (streaming, metadata reads, listings, sharing, deletion) goes
through the functions in this module; none of them re-implement the rules.

Rules are evaluated in order and the first match wins:

1. ``OWNER``          the user owns the document
2. ``PUBLIC``         the document visibility is public
3. ``ADMINISTRATIVE`` Admin on any document, HoD on documents owned by a
                      non-Admin member of their own department
4. ``GRANTEE``        a share grant names the user as grantee

Which of these rules a role may satisfy is fixed by ``ROLE_RULES``.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from domain.value_objects.user_role import UserRole
from domain.value_objects.visibility import Visibility

if TYPE_CHECKING:
    from uuid import UUID

    from domain.aggregates.document import Document
    from domain.aggregates.user import User


class AccessRule(str, Enum):
    OWNER = "owner"
    PUBLIC = "public"
    ADMINISTRATIVE = "administrative"
    GRANTEE = "grantee"


RULE_ORDER: tuple[AccessRule, ...] = (
    AccessRule.OWNER,
    AccessRule.PUBLIC,
    AccessRule.ADMINISTRATIVE,
    AccessRule.GRANTEE,
)

_EVERYONE = frozenset({AccessRule.OWNER, AccessRule.PUBLIC, AccessRule.GRANTEE})

ROLE_RULES: dict[UserRole, frozenset[AccessRule]] = {
    UserRole.ADMIN: frozenset(RULE_ORDER),
    UserRole.HOD: frozenset(RULE_ORDER),
    UserRole.LECTURER: _EVERYONE,
    UserRole.STUDENT: _EVERYONE,
}

# Public visibility lets anyone read, never re-share.
SHARE_RULES = frozenset({AccessRule.OWNER, AccessRule.ADMINISTRATIVE, AccessRule.GRANTEE})


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    rule: AccessRule | None = None

    def __bool__(self) -> bool:
        return self.allowed


DENY = AccessDecision(allowed=False)


def _rule_matches(
    rule: AccessRule,
    user: User,
    document: Document,
    owner: User | None,
    grantee_ids: Collection[UUID],
) -> bool:
    if rule is AccessRule.OWNER:
        return document.owner_id == user.id
    if rule is AccessRule.PUBLIC:
        return document.visibility == Visibility.PUBLIC
    if rule is AccessRule.ADMINISTRATIVE:
        if user.role == UserRole.ADMIN:
            return True
        if user.role == UserRole.HOD:
            return (
                owner is not None
                and user.department_id is not None
                and owner.role != UserRole.ADMIN
                and owner.department_id == user.department_id
            )
        return False
    return user.id in grantee_ids


def decide(
    user: User,
    document: Document,
    *,
    owner: User | None = None,
    grantee_ids: Collection[UUID] = (),
    rules: Collection[AccessRule] = RULE_ORDER,
) -> AccessDecision:
    """Decide whether ``user`` may read ``document``.

    Pure and deterministic: the result depends only on the arguments.

    Args:
        user: The requesting user.
        document: The document being accessed.
        owner: The document owner as known to the user directory (needed for the
            department check); ``None`` when the owner is unknown.
        grantee_ids: Ids of every user holding a share grant on the document.
        rules: Restrict evaluation to a subset of rules (order is always
            ``RULE_ORDER``).

    Returns:
        The decision and the rule that allowed it.

    """
    permitted = ROLE_RULES.get(user.role, frozenset())
    for rule in RULE_ORDER:
        if rule not in rules or rule not in permitted:
            continue
        if _rule_matches(rule, user, document, owner, grantee_ids):
            return AccessDecision(allowed=True, rule=rule)
    return DENY


def can_share(
    user: User,
    document: Document,
    *,
    owner: User | None = None,
    grantee_ids: Collection[UUID] = (),
) -> AccessDecision:
    """Whether ``user`` may create share grants on ``document``."""
    return decide(user, document, owner=owner, grantee_ids=grantee_ids, rules=SHARE_RULES)


def can_manage(user: User, owner_id: UUID) -> bool:
    """Whether ``user`` may update or delete a record owned by ``owner_id``."""
    return user.id == owner_id or user.role == UserRole.ADMIN
