"""TaskFlow client core.

A task store kept in sync with the TaskFlow REST backend, the projections
each view derives from it, the open-tabs controller and the
create/edit/delete protocol. The Streamlit pages in ``app.py`` and
``pages/`` only render what these produce.
"""

from .calendar_grid import CalendarCell, calendar_grid, calendar_weeks, shift_month
from .config import TaskflowConfig, configure_logging
from .gateway import GatewayResponse, TaskflowGateway
from .models import Category, Task, TaskPriority, TaskStatus
from .protocol import TaskEditor, TaskForm
from .results import OperationResult
from .store import StoreEvent, TaskStore
from .tabs import OpenTabsController
from .tasks_repo import TaskRepository
from .workspace import Workspace, get_workspace

__all__ = [
    "CalendarCell",
    "Category",
    "GatewayResponse",
    "OpenTabsController",
    "OperationResult",
    "StoreEvent",
    "Task",
    "TaskEditor",
    "TaskForm",
    "TaskPriority",
    "TaskRepository",
    "TaskStatus",
    "TaskStore",
    "TaskflowConfig",
    "TaskflowGateway",
    "Workspace",
    "calendar_grid",
    "calendar_weeks",
    "configure_logging",
    "get_workspace",
    "shift_month",
]
