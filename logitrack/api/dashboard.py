"""
Dashboard API - task workload statistics
"""
from fastapi import APIRouter, Depends
from typing import Dict, List, Optional
from pydantic import BaseModel

from logitrack.models.user import User
from logitrack.api.auth import UserResponse, require
from logitrack.api.tasks import TaskResponse
from logitrack.services.permissions import Action, sees_all_tasks
from logitrack.services.storage import Storage, TaskFilter, get_storage

router = APIRouter()


class TaskCountsResponse(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    overdue: int

    class Config:
        from_attributes = True


class AssigneeStatsResponse(BaseModel):
    assignee_id: int
    total: int
    pending: int
    in_progress: int
    completed: int
    user: Optional[UserResponse] = None

    class Config:
        from_attributes = True


class DashboardStatsResponse(BaseModel):
    counts: TaskCountsResponse
    completion_rate: float
    on_time_percentage: float
    priorities: Dict[str, int]
    types: Dict[str, int]
    assignees: List[AssigneeStatsResponse]
    recent_tasks: List[TaskResponse]
    pending_tasks: List[TaskResponse]
    upcoming_deadlines: List[TaskResponse]

    class Config:
        from_attributes = True


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.DASHBOARD_VIEW))
):
    """Snapshot of the caller's visible workload: all tasks for admins and
    managers, only the caller's assigned tasks for everyone else."""
    task_filter = None if sees_all_tasks(current_user) else TaskFilter(assigned_to=current_user.id)
    stats = await storage.get_dashboard_stats(task_filter)
    return DashboardStatsResponse.model_validate(stats)
