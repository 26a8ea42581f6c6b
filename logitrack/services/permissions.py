"""
Role-based access policy.

Every route asks one question - may this role perform this action - through
``is_allowed``; the per-task rules (who may see or edit a given task) live
alongside it so handlers don't repeat role checks inline.
"""
from enum import Enum
from typing import Dict, FrozenSet, Iterable

from logitrack.models.user import User, UserRole


class Action(str, Enum):
    SHIPMENT_READ = "shipment:read"
    SHIPMENT_WRITE = "shipment:write"
    PAYMENT_READ = "payment:read"
    PAYMENT_WRITE = "payment:write"
    DAMAGE_READ = "damage:read"
    DAMAGE_CREATE = "damage:create"
    DAMAGE_WRITE = "damage:write"
    COMPLAINT_READ = "complaint:read"
    COMPLAINT_CREATE = "complaint:create"
    COMPLAINT_WRITE = "complaint:write"
    CLIENT_READ = "client:read"
    CLIENT_WRITE = "client:write"
    TASK_READ_OWN = "task:read_own"
    TASK_READ_ALL = "task:read_all"
    TASK_CREATE = "task:create"
    TASK_UPDATE = "task:update"
    TASK_DELETE = "task:delete"
    USER_READ = "user:read"
    USER_WRITE = "user:write"
    DASHBOARD_VIEW = "dashboard:view"


ADMIN = UserRole.ADMIN
MANAGER = UserRole.MANAGER
EMPLOYEE = UserRole.EMPLOYEE
CLIENT = UserRole.CLIENT

_EVERYONE = frozenset({ADMIN, MANAGER, EMPLOYEE, CLIENT})
_STAFF = frozenset({ADMIN, MANAGER, EMPLOYEE})
_MANAGERS = frozenset({ADMIN, MANAGER})
_ADMINS = frozenset({ADMIN})

POLICY: Dict[Action, FrozenSet[UserRole]] = {
    Action.SHIPMENT_READ: _EVERYONE,
    Action.SHIPMENT_WRITE: _MANAGERS,
    Action.PAYMENT_READ: _EVERYONE,
    Action.PAYMENT_WRITE: _MANAGERS,
    Action.DAMAGE_READ: _EVERYONE,
    Action.DAMAGE_CREATE: _EVERYONE,
    Action.DAMAGE_WRITE: _MANAGERS,
    Action.COMPLAINT_READ: _EVERYONE,
    Action.COMPLAINT_CREATE: _EVERYONE,
    Action.COMPLAINT_WRITE: _MANAGERS,
    Action.CLIENT_READ: _EVERYONE,
    Action.CLIENT_WRITE: _MANAGERS,
    Action.TASK_READ_OWN: _STAFF,
    Action.TASK_READ_ALL: _MANAGERS,
    Action.TASK_CREATE: _MANAGERS,
    Action.TASK_UPDATE: _STAFF,
    Action.TASK_DELETE: _MANAGERS,
    Action.USER_READ: _MANAGERS,
    Action.USER_WRITE: _ADMINS,
    Action.DASHBOARD_VIEW: _EVERYONE,
}

# Fields an assignee may change on a task somebody else handed them
ASSIGNEE_EDITABLE_FIELDS = frozenset({"status", "comments"})


def is_allowed(role, action: Action) -> bool:
    """Unknown actions and roles are denied"""
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return role in POLICY.get(action, frozenset())


def sees_all_tasks(user: User) -> bool:
    return is_allowed(user.role, Action.TASK_READ_ALL)


def can_view_task(user: User, task) -> bool:
    if sees_all_tasks(user):
        return True
    return user.id in (task.assigned_to, task.assigned_by)


def can_update_task(user: User, task, fields: Iterable[str]) -> bool:
    """Managers and the assigner may edit anything; the assignee only its progress"""
    if not is_allowed(user.role, Action.TASK_UPDATE):
        return False
    if sees_all_tasks(user) or task.assigned_by == user.id:
        return True
    if task.assigned_to == user.id:
        return set(fields) <= ASSIGNEE_EDITABLE_FIELDS
    return False
