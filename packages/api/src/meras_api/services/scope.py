# This project was developed with assistance from AI tools.
"""Per-entity scope predicates.

Every entity follows the same shape: ADMIN sees everything, other roles see
the OR of a few anchor clauses (branch membership, WhatsApp-account
membership, self-ownership). ``ENTITY_SCOPES`` declares, per entity type,
where each anchor lives and which anchors each role may use; one builder
turns that into a Predicate.

An anchor whose scope set is empty contributes nothing, so a non-admin with
no memberships always gets the match-nothing predicate, never match-all.
"""

import enum
from dataclasses import dataclass, field
from types import MappingProxyType

from meras_db.enums import EntityType, UserRole

from ..core.predicates import MATCH_ALL, NOTHING, Eq, In, Predicate, any_of
from ..schemas.auth import Scope


class Anchor(str, enum.Enum):
    BRANCH = "branch"
    ACCOUNT = "account"
    OWNER = "owner"


@dataclass(frozen=True)
class EntityScopeSpec:
    """Where an entity's scope anchors live and which roles may use them."""

    branch_field: str | None = None
    account_field: str | None = None
    owner_field: str | None = None
    role_anchors: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def anchors_for(self, role: UserRole) -> tuple[Anchor, ...]:
        return self.role_anchors.get(role, ())


def _spec(*, branch=None, account=None, owner=None, supervisor=(), agent=()) -> EntityScopeSpec:
    return EntityScopeSpec(
        branch_field=branch,
        account_field=account,
        owner_field=owner,
        role_anchors=MappingProxyType(
            {UserRole.SUPERVISOR: tuple(supervisor), UserRole.AGENT: tuple(agent)}
        ),
    )


ENTITY_SCOPES: MappingProxyType[EntityType, EntityScopeSpec] = MappingProxyType(
    {
        EntityType.CONVERSATION: _spec(
            branch="contact.branch_id",
            account="messages.whatsapp_account_id",
            owner="assigned_to_id",
            supervisor=(Anchor.BRANCH, Anchor.ACCOUNT),
            agent=(Anchor.OWNER,),
        ),
        EntityType.CONTACT: _spec(
            branch="branch_id",
            account="conversations.messages.whatsapp_account_id",
            owner="conversations.assigned_to_id",
            supervisor=(Anchor.BRANCH, Anchor.ACCOUNT),
            agent=(Anchor.OWNER,),
        ),
        EntityType.BOOKING: _spec(
            branch="contact.branch_id",
            owner="agent_id",
            supervisor=(Anchor.BRANCH,),
            agent=(Anchor.OWNER,),
        ),
        EntityType.TEMPLATE: _spec(
            account="whatsapp_account_id",
            supervisor=(Anchor.ACCOUNT,),
            agent=(Anchor.ACCOUNT,),
        ),
        EntityType.BOT_FLOW: _spec(
            branch="branch_id",
            account="whatsapp_account_id",
            supervisor=(Anchor.BRANCH, Anchor.ACCOUNT),
            agent=(Anchor.BRANCH, Anchor.ACCOUNT),
        ),
        EntityType.OFFER: _spec(
            account="whatsapp_account_id",
            supervisor=(Anchor.ACCOUNT,),
            agent=(Anchor.ACCOUNT,),
        ),
        EntityType.WHATSAPP_ACCOUNT: _spec(
            branch="branch_id",
            account="id",
            supervisor=(Anchor.ACCOUNT, Anchor.BRANCH),
            agent=(Anchor.ACCOUNT,),
        ),
        EntityType.BRANCH: _spec(
            branch="id",
            supervisor=(Anchor.BRANCH,),
            agent=(Anchor.BRANCH,),
        ),
    }
)


def _anchor_clause(entry: EntityScopeSpec, anchor: Anchor, scope: Scope) -> Predicate:
    if anchor == Anchor.BRANCH and entry.branch_field:
        return In(entry.branch_field, tuple(scope.branch_ids))
    if anchor == Anchor.ACCOUNT and entry.account_field:
        return In(entry.account_field, tuple(scope.whatsapp_account_ids))
    if anchor == Anchor.OWNER and entry.owner_field and scope.user_id:
        return Eq(entry.owner_field, scope.user_id)
    return NOTHING


def build_scope_filter(entity_type: EntityType, scope: Scope) -> Predicate:
    """Return the predicate selecting the ``entity_type`` rows ``scope`` may act on."""
    if scope.is_admin:
        return MATCH_ALL

    entry = ENTITY_SCOPES.get(EntityType(entity_type))
    if entry is None:
        return NOTHING

    return any_of(*(_anchor_clause(entry, a, scope) for a in entry.anchors_for(scope.role)))


def build_conversation_scope(scope: Scope) -> Predicate:
    """SUPERVISOR: contact in branch OR any message via a scoped account. AGENT: assigned to self."""
    return build_scope_filter(EntityType.CONVERSATION, scope)


def build_contact_scope(scope: Scope) -> Predicate:
    """SUPERVISOR: branch OR a conversation via a scoped account. AGENT: a conversation assigned to self."""
    return build_scope_filter(EntityType.CONTACT, scope)


def build_booking_scope(scope: Scope) -> Predicate:
    """SUPERVISOR: contact in branch. AGENT: agent is self."""
    return build_scope_filter(EntityType.BOOKING, scope)


def build_template_scope(scope: Scope) -> Predicate:
    return build_scope_filter(EntityType.TEMPLATE, scope)


def build_bot_flow_scope(scope: Scope) -> Predicate:
    return build_scope_filter(EntityType.BOT_FLOW, scope)


def build_offer_scope(scope: Scope) -> Predicate:
    return build_scope_filter(EntityType.OFFER, scope)


def build_whatsapp_account_scope(scope: Scope) -> Predicate:
    return build_scope_filter(EntityType.WHATSAPP_ACCOUNT, scope)


def build_branch_scope(scope: Scope) -> Predicate:
    return build_scope_filter(EntityType.BRANCH, scope)
