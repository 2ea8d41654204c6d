from taskflow.auth import set_login_state
from taskflow.config import TaskflowConfig
from taskflow.gateway import GatewayResponse
from taskflow.workspace import SESSION_KEY, Workspace, get_workspace, reset_workspace


class CannedGateway:
    token = None

    def __init__(self, fail_categories=False):
        self.fail_categories = fail_categories

    def set_token(self, token):
        self.token = token or None

    def get(self, path, **kwargs):
        if path == "/tasks":
            return GatewayResponse(ok=True, status_code=200, url=path, method="GET", data={"content": [{"id": 1, "title": "t"}]})
        if self.fail_categories:
            return GatewayResponse(ok=False, status_code=500, url=path, method="GET", error="boom")
        return GatewayResponse(ok=True, status_code=200, url=path, method="GET", data={"data": [{"id": 3, "name": "Work"}]})


def test_get_workspace_builds_once_and_syncs_token():
    state = {}
    config = TaskflowConfig()
    first = get_workspace(state, config)
    assert state[SESSION_KEY] is first
    assert first.gateway.token is None

    set_login_state(state, True, token="jwt")
    second = get_workspace(state, config)
    assert second is first
    assert second.gateway.token == "jwt"

    reset_workspace(state)
    assert SESSION_KEY not in state


def test_refresh_loads_tasks_and_categories():
    workspace = Workspace.build(TaskflowConfig(), gateway=CannedGateway())
    workspace.ensure_loaded()
    assert workspace.store.ids() == ["1"]
    assert workspace.categories.name_for("3") == "Work"
    assert workspace.categories_error is None


def test_category_failure_is_reported_not_raised():
    workspace = Workspace.build(TaskflowConfig(), gateway=CannedGateway(fail_categories=True))
    workspace.refresh()
    assert workspace.store.ids() == ["1"]
    assert workspace.categories_error == "boom"
    assert len(workspace.categories) == 0
