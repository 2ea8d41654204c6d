from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, MutableMapping, Optional

from .auth import current_token
from .categories import CategoryIndex, CategoryRepository
from .config import TaskflowConfig
from .gateway import TaskflowGateway
from .projections import ExplorerState
from .protocol import TaskEditor
from .store import TaskStore
from .tabs import OpenTabsController
from .tasks_repo import TaskRepository


logger = logging.getLogger(__name__)

SESSION_KEY = "taskflow_workspace"


@dataclass
class Workspace:
    """Everything one signed-in session works with, wired together once."""

    config: TaskflowConfig
    gateway: TaskflowGateway
    repository: TaskRepository
    store: TaskStore
    tabs: OpenTabsController
    editor: TaskEditor
    category_repository: CategoryRepository
    categories: CategoryIndex = field(default_factory=CategoryIndex)
    categories_error: Optional[str] = None
    explorer: ExplorerState = field(default_factory=ExplorerState)

    @classmethod
    def build(cls, config: TaskflowConfig, *, token: Optional[str] = None, gateway: Optional[TaskflowGateway] = None) -> "Workspace":
        gateway = gateway or TaskflowGateway.from_config(config, token=token)
        repository = TaskRepository(gateway)
        store = TaskStore(repository)
        return cls(
            config=config,
            gateway=gateway,
            repository=repository,
            store=store,
            tabs=OpenTabsController(store),
            editor=TaskEditor(store, repository),
            category_repository=CategoryRepository(gateway),
        )

    def refresh(self) -> None:
        """Reload tasks and categories; failures surface as ``error`` fields."""
        self.store.load()
        fetched = self.category_repository.get_categories()
        if fetched.ok:
            self.categories = CategoryIndex(fetched.categories)
            self.categories_error = None
        else:
            self.categories_error = fetched.error
            logger.warning("Category load failed: %s", fetched.error)

    def ensure_loaded(self) -> None:
        if not self.store.loaded and self.store.error is None:
            self.refresh()


def get_workspace(session_state: MutableMapping[str, Any], config: Optional[TaskflowConfig] = None) -> Workspace:
    """Return the session's workspace, building it on first use.

    The gateway token is kept in step with the session's login state.
    """
    workspace = session_state.get(SESSION_KEY)
    if workspace is None:
        workspace = Workspace.build(config or TaskflowConfig.from_env(), token=current_token(session_state))
        session_state[SESSION_KEY] = workspace
    token = current_token(session_state) or workspace.config.api_token
    if workspace.gateway.token != token:
        workspace.gateway.set_token(token)
    return workspace


def reset_workspace(session_state: MutableMapping[str, Any]) -> None:
    workspace = session_state.pop(SESSION_KEY, None)
    if workspace is not None:
        workspace.tabs.detach()
