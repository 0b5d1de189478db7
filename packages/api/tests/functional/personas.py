# This project was developed with assistance from AI tools.
"""Persona factories for functional tests.

Each function returns the (Identity, Scope) pair the gate would resolve for
that user. Fixed IDs ensure cross-test consistency.
"""

from meras_db.enums import UserRole

from meras_api.schemas.auth import Identity, Scope

ADMIN_USER_ID = "admin-user"
SUPERVISOR_USER_ID = "noura-supervisor"
UNASSIGNED_SUPERVISOR_ID = "new-supervisor"
AGENT_USER_ID = "omar-agent"

RIYADH_BRANCH = "branch-riyadh"
JEDDAH_BRANCH = "branch-jeddah"
SALES_ACCOUNT = "wa-sales"
SUPPORT_ACCOUNT = "wa-support"


def _persona(user_id, role, branches=(), accounts=()) -> tuple[Identity, Scope]:
    identity = Identity(user_id=user_id, email=f"{user_id}@meras.example", role=role)
    scope = Scope(
        user_id=user_id,
        role=role,
        branch_ids=frozenset(branches),
        whatsapp_account_ids=frozenset(accounts),
    )
    return identity, scope


def admin():
    return _persona(ADMIN_USER_ID, UserRole.ADMIN)


def supervisor():
    return _persona(
        SUPERVISOR_USER_ID,
        UserRole.SUPERVISOR,
        branches=[RIYADH_BRANCH],
        accounts=[SALES_ACCOUNT],
    )


def unassigned_supervisor():
    """Supervisor with no branches and no accounts yet."""
    return _persona(UNASSIGNED_SUPERVISOR_ID, UserRole.SUPERVISOR)


def agent():
    return _persona(
        AGENT_USER_ID,
        UserRole.AGENT,
        branches=[RIYADH_BRANCH],
        accounts=[SUPPORT_ACCOUNT],
    )
