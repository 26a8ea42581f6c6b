"""
Task API endpoints - work assigned between users, scoped by role
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, computed_field

from logitrack.models.user import User
from logitrack.models.task import TaskPriority, TaskStatus, TaskType
from logitrack.api.auth import require
from logitrack.services.permissions import Action, can_update_task, can_view_task, sees_all_tasks
from logitrack.services.reporting import is_overdue
from logitrack.services.storage import Storage, TaskFilter, get_storage
from logitrack.utils.helpers import update_values, utcnow
from logitrack.utils.logger import get_logger
from logitrack.utils.validators import UTCDateTime

logger = get_logger(__name__)

router = APIRouter()

# Columns that cannot be cleared with an explicit null
NOT_NULL_FIELDS = ("title", "priority", "type", "status")


# --- Pydantic Schemas ---

class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    assigned_to: Optional[int]
    assigned_by: Optional[int]
    priority: TaskPriority
    type: TaskType
    related_id: Optional[int]
    status: TaskStatus
    due_date: Optional[datetime]
    reminder_date: Optional[datetime]
    completed_at: Optional[datetime]
    comments: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return is_overdue(self, utcnow())


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    type: TaskType = TaskType.GENERAL
    related_id: Optional[int] = None
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[UTCDateTime] = None
    reminder_date: Optional[UTCDateTime] = None
    comments: Optional[str] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    priority: Optional[TaskPriority] = None
    type: Optional[TaskType] = None
    related_id: Optional[int] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[UTCDateTime] = None
    reminder_date: Optional[UTCDateTime] = None
    comments: Optional[str] = None


# --- Endpoints ---

@router.get("/my-tasks", response_model=List[TaskResponse])
async def list_my_tasks(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.TASK_READ_OWN))
):
    """Tasks assigned to the caller"""
    return await storage.list_tasks(TaskFilter(assigned_to=current_user.id))


@router.get("/assigned-by-me", response_model=List[TaskResponse])
async def list_tasks_assigned_by_me(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.TASK_READ_ALL))
):
    """Tasks the caller handed out"""
    return await storage.list_tasks(TaskFilter(assigned_by=current_user.id))


@router.get("/", response_model=List[TaskResponse])
async def list_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    type: Optional[TaskType] = None,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.TASK_READ_OWN))
):
    """All tasks for admins and managers; everyone else sees their own"""
    task_filter = TaskFilter(status=status, priority=priority, type=type)
    if not sees_all_tasks(current_user):
        task_filter.assigned_to = current_user.id
    return await storage.list_tasks(task_filter)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.TASK_READ_OWN))
):
    task = await storage.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    if not can_view_task(current_user, task):
        raise HTTPException(status_code=403, detail="You don't have permission to view this task")
    return task


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.TASK_CREATE))
):
    """Create a task; the caller is recorded as the assigner"""
    if data.assigned_to is not None and not await storage.get_user(data.assigned_to):
        raise HTTPException(status_code=400, detail="Assignee does not exist")

    task = await storage.create_task({**data.model_dump(), "assigned_by": current_user.id})
    logger.info(f"Task {task.id} assigned to {task.assigned_to} by {current_user.username}")
    return task


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.TASK_UPDATE))
):
    """Update a task. Explicit nulls clear optional fields."""
    task = await storage.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    updates = update_values(data, NOT_NULL_FIELDS)

    if not can_update_task(current_user, task, updates.keys()):
        raise HTTPException(status_code=403, detail="You don't have permission to update this task")
    if updates.get("assigned_to") is not None and not await storage.get_user(updates["assigned_to"]):
        raise HTTPException(status_code=400, detail="Assignee does not exist")

    return await storage.update_task(task, updates)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.TASK_DELETE))
):
    task = await storage.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    await storage.delete_task(task)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
