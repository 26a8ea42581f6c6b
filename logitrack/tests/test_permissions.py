"""
Role policy tests
"""
from types import SimpleNamespace

import pytest

from logitrack.models.user import UserRole
from logitrack.services.permissions import (
    POLICY, Action, can_update_task, can_view_task, is_allowed, sees_all_tasks,
)


def user(user_id, role):
    return SimpleNamespace(id=user_id, role=role)


def task(assigned_to=None, assigned_by=None):
    return SimpleNamespace(assigned_to=assigned_to, assigned_by=assigned_by)


def test_every_action_has_a_policy_entry():
    assert set(POLICY) == set(Action)


@pytest.mark.parametrize("action", [
    Action.SHIPMENT_READ,
    Action.PAYMENT_READ,
    Action.DAMAGE_READ,
    Action.DAMAGE_CREATE,
    Action.COMPLAINT_READ,
    Action.COMPLAINT_CREATE,
    Action.CLIENT_READ,
    Action.DASHBOARD_VIEW,
])
def test_open_to_every_role(action):
    for role in UserRole:
        assert is_allowed(role, action)


@pytest.mark.parametrize("action", [
    Action.SHIPMENT_WRITE,
    Action.PAYMENT_WRITE,
    Action.DAMAGE_WRITE,
    Action.COMPLAINT_WRITE,
    Action.CLIENT_WRITE,
    Action.TASK_READ_ALL,
    Action.TASK_CREATE,
    Action.TASK_DELETE,
    Action.USER_READ,
])
def test_managers_only(action):
    assert is_allowed(UserRole.ADMIN, action)
    assert is_allowed(UserRole.MANAGER, action)
    assert not is_allowed(UserRole.EMPLOYEE, action)
    assert not is_allowed(UserRole.CLIENT, action)


def test_task_self_service_is_staff_only():
    for action in (Action.TASK_READ_OWN, Action.TASK_UPDATE):
        assert is_allowed(UserRole.EMPLOYEE, action)
        assert is_allowed(UserRole.MANAGER, action)
        assert not is_allowed(UserRole.CLIENT, action)


def test_user_management_is_admin_only():
    assert is_allowed(UserRole.ADMIN, Action.USER_WRITE)
    assert not is_allowed(UserRole.MANAGER, Action.USER_WRITE)


def test_plain_string_roles_and_unknown_roles():
    assert is_allowed("manager", Action.TASK_CREATE)
    assert not is_allowed("superuser", Action.SHIPMENT_READ)
    assert not is_allowed(None, Action.SHIPMENT_READ)


def test_task_visibility():
    manager = user(1, UserRole.MANAGER)
    employee = user(2, UserRole.EMPLOYEE)
    bystander = user(3, UserRole.EMPLOYEE)
    handed_out = task(assigned_to=2, assigned_by=1)

    assert sees_all_tasks(manager)
    assert not sees_all_tasks(employee)
    assert can_view_task(manager, task(assigned_to=9, assigned_by=9))
    assert can_view_task(employee, handed_out)
    assert not can_view_task(bystander, handed_out)


def test_assignee_may_only_change_progress():
    employee = user(2, UserRole.EMPLOYEE)
    handed_out = task(assigned_to=2, assigned_by=1)

    assert can_update_task(employee, handed_out, ["status"])
    assert can_update_task(employee, handed_out, ["status", "comments"])
    assert not can_update_task(employee, handed_out, ["status", "due_date"])
    assert not can_update_task(employee, handed_out, ["assigned_to"])


def test_assigner_and_managers_may_change_anything():
    employee = user(2, UserRole.EMPLOYEE)
    own = task(assigned_to=2, assigned_by=2)
    manager = user(1, UserRole.MANAGER)

    assert can_update_task(employee, own, ["title", "due_date"])
    assert can_update_task(manager, task(assigned_to=5, assigned_by=6), ["priority"])


def test_unrelated_or_client_users_cannot_update():
    assert not can_update_task(user(3, UserRole.EMPLOYEE), task(assigned_to=2, assigned_by=1), ["status"])
    assert not can_update_task(user(2, UserRole.CLIENT), task(assigned_to=2, assigned_by=2), ["status"])
