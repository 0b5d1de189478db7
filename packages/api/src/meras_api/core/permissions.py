# This project was developed with assistance from AI tools.
"""Static permission table.

Capabilities are granted per role, independent of role rank: a SUPERVISOR
reads more than an AGENT, yet both may create bot flows and neither may
delete anything. The table is built once at import and is read-only.
"""

import enum
from types import MappingProxyType

from meras_db.enums import EntityType, UserRole


class Capability(str, enum.Enum):
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_INBOX = "view_inbox"
    VIEW_CONTACTS = "view_contacts"
    CREATE_CONTACT = "create_contact"
    EDIT_CONTACT = "edit_contact"
    DELETE_CONTACT = "delete_contact"
    VIEW_BOOKINGS = "view_bookings"
    CREATE_BOOKING = "create_booking"
    EDIT_BOOKING = "edit_booking"
    DELETE_BOOKING = "delete_booking"
    VIEW_TEMPLATES = "view_templates"
    CREATE_TEMPLATE = "create_template"
    EDIT_TEMPLATE = "edit_template"
    DELETE_TEMPLATE = "delete_template"
    VIEW_OFFERS = "view_offers"
    CREATE_OFFER = "create_offer"
    EDIT_OFFER = "edit_offer"
    DELETE_OFFER = "delete_offer"
    VIEW_INVOICES = "view_invoices"
    CREATE_INVOICE = "create_invoice"
    EDIT_INVOICE = "edit_invoice"
    DELETE_INVOICE = "delete_invoice"
    VIEW_BRANCHES = "view_branches"
    CREATE_BRANCH = "create_branch"
    EDIT_BRANCH = "edit_branch"
    DELETE_BRANCH = "delete_branch"
    VIEW_USERS = "view_users"
    CREATE_USER = "create_user"
    EDIT_USER = "edit_user"
    DELETE_USER = "delete_user"
    VIEW_ACCOUNTS = "view_accounts"
    MANAGE_ACCOUNTS = "manage_accounts"
    VIEW_SETTINGS = "view_settings"
    MANAGE_SETTINGS = "manage_settings"
    VIEW_ANALYTICS = "view_analytics"
    VIEW_ACTIVITY_LOGS = "view_activity_logs"
    MANAGE_WHATSAPP = "manage_whatsapp"
    VIEW_BOT_FLOWS = "view_bot_flows"
    CREATE_BOT_FLOW = "create_bot_flow"
    EDIT_BOT_FLOW = "edit_bot_flow"
    DELETE_BOT_FLOW = "delete_bot_flow"


class Page(str, enum.Enum):
    DASHBOARD = "/dashboard"
    INBOX = "/inbox"
    CONTACTS = "/contacts"
    BOOKINGS = "/bookings"
    TEMPLATES = "/templates"
    OFFERS = "/offers"
    INVOICES = "/invoices"
    BRANCHES = "/branches"
    USERS = "/users"
    ACCOUNTS = "/accounts"
    SETTINGS = "/settings"
    ANALYTICS = "/analytics"
    LOGS = "/logs"
    WHATSAPP = "/whatsapp"
    BOT_FLOWS = "/bot-flows"


C = Capability

_SUPERVISOR_CAPABILITIES = frozenset(
    {
        C.VIEW_DASHBOARD,
        C.VIEW_INBOX,
        C.VIEW_CONTACTS, C.CREATE_CONTACT, C.EDIT_CONTACT,
        C.VIEW_BOOKINGS, C.CREATE_BOOKING, C.EDIT_BOOKING,
        C.VIEW_TEMPLATES,
        C.VIEW_OFFERS, C.CREATE_OFFER, C.EDIT_OFFER,
        C.VIEW_INVOICES, C.CREATE_INVOICE, C.EDIT_INVOICE,
        C.VIEW_BRANCHES,
        C.VIEW_USERS,
        C.VIEW_SETTINGS,
        C.VIEW_ANALYTICS,
        C.VIEW_ACTIVITY_LOGS,
        C.VIEW_BOT_FLOWS, C.CREATE_BOT_FLOW,
    }
)

_AGENT_CAPABILITIES = frozenset(
    {
        C.VIEW_DASHBOARD,
        C.VIEW_INBOX,
        C.VIEW_CONTACTS, C.CREATE_CONTACT, C.EDIT_CONTACT,
        C.VIEW_BOOKINGS, C.CREATE_BOOKING, C.EDIT_BOOKING,
        C.VIEW_TEMPLATES,
        C.VIEW_OFFERS, C.CREATE_OFFER, C.EDIT_OFFER,
        C.VIEW_INVOICES, C.CREATE_INVOICE, C.EDIT_INVOICE,
        C.VIEW_SETTINGS,
        C.VIEW_ANALYTICS,
        C.VIEW_BOT_FLOWS, C.CREATE_BOT_FLOW,
    }
)

ROLE_CAPABILITIES: MappingProxyType[UserRole, frozenset[Capability]] = MappingProxyType(
    {
        UserRole.ADMIN: frozenset(Capability),
        UserRole.SUPERVISOR: _SUPERVISOR_CAPABILITIES,
        UserRole.AGENT: _AGENT_CAPABILITIES,
    }
)

_ALL_ROLES = frozenset(UserRole)
_MANAGERS = frozenset({UserRole.ADMIN, UserRole.SUPERVISOR})
_ADMIN_ONLY = frozenset({UserRole.ADMIN})

PAGE_ACCESS: MappingProxyType[Page, frozenset[UserRole]] = MappingProxyType(
    {
        Page.DASHBOARD: _ALL_ROLES,
        Page.INBOX: _ALL_ROLES,
        Page.CONTACTS: _ALL_ROLES,
        Page.BOOKINGS: _ALL_ROLES,
        Page.TEMPLATES: _ALL_ROLES,
        Page.OFFERS: _ALL_ROLES,
        Page.INVOICES: _ALL_ROLES,
        Page.BRANCHES: _MANAGERS,
        Page.USERS: _MANAGERS,
        Page.ACCOUNTS: _ADMIN_ONLY,
        Page.SETTINGS: _ALL_ROLES,
        Page.ANALYTICS: _ALL_ROLES,
        Page.LOGS: _MANAGERS,
        Page.WHATSAPP: _ADMIN_ONLY,
        Page.BOT_FLOWS: _ALL_ROLES,
    }
)

# Entity types without an entry here are deletable by ADMIN only.
DELETE_CAPABILITIES: MappingProxyType[EntityType, Capability] = MappingProxyType(
    {
        EntityType.CONTACT: C.DELETE_CONTACT,
        EntityType.BOOKING: C.DELETE_BOOKING,
        EntityType.TEMPLATE: C.DELETE_TEMPLATE,
        EntityType.BOT_FLOW: C.DELETE_BOT_FLOW,
        EntityType.OFFER: C.DELETE_OFFER,
        EntityType.BRANCH: C.DELETE_BRANCH,
    }
)

del C


def _as_role(role: UserRole | str) -> UserRole | None:
    try:
        return UserRole(role)
    except ValueError:
        return None


def _as_capability(capability: Capability | str) -> Capability | None:
    try:
        return Capability(capability)
    except ValueError:
        return None


def has_permission(role: UserRole | str, capability: Capability | str) -> bool:
    """Return True if ``role`` is granted ``capability``. Unknown names are never granted."""
    resolved_role = _as_role(role)
    resolved_cap = _as_capability(capability)
    if resolved_role is None or resolved_cap is None:
        return False
    return resolved_cap in ROLE_CAPABILITIES.get(resolved_role, frozenset())


def get_role_permissions(role: UserRole | str) -> frozenset[Capability]:
    resolved = _as_role(role)
    if resolved is None:
        return frozenset()
    return ROLE_CAPABILITIES.get(resolved, frozenset())


def can_perform_action(role: UserRole | str, action: str, entity: str) -> bool:
    """Check a CRUD action, e.g. ``can_perform_action(role, "delete", "template")``."""
    return has_permission(role, f"{action}_{entity}")


def can_access_page(role: UserRole | str, page: Page | str) -> bool:
    resolved_role = _as_role(role)
    try:
        resolved_page = Page(page)
    except ValueError:
        return False
    return resolved_role in PAGE_ACCESS[resolved_page]


def get_accessible_pages(role: UserRole | str) -> list[Page]:
    resolved = _as_role(role)
    return [page for page, roles in PAGE_ACCESS.items() if resolved in roles]


def is_delete_allowed(role: UserRole | str, entity_type: EntityType | str) -> bool:
    """ADMIN may delete anything; other roles only where the entity's delete capability is granted."""
    resolved_role = _as_role(role)
    if resolved_role == UserRole.ADMIN:
        return True
    try:
        capability = DELETE_CAPABILITIES.get(EntityType(entity_type))
    except ValueError:
        return False
    if capability is None or resolved_role is None:
        return False
    return has_permission(resolved_role, capability)
