from taskflow.envelope import EnvelopeShape, classify, error_message, unwrap_item, unwrap_list
from taskflow.store import TaskStore
from taskflow.tasks_repo import TaskRepository
from taskflow.gateway import GatewayResponse


ITEMS = [{"id": 1, "title": "one"}, {"id": 2, "title": "two"}, {"id": 3, "title": "three"}]


class StubGateway:
    def __init__(self, payload):
        self.payload = payload

    def get(self, path, **kwargs):
        return GatewayResponse(ok=True, status_code=200, url=path, method="GET", data=self.payload)


def test_classify_each_shape():
    assert classify(ITEMS)[0] is EnvelopeShape.BARE_LIST
    assert classify({"content": ITEMS})[0] is EnvelopeShape.CONTENT_LIST
    assert classify({"data": ITEMS})[0] is EnvelopeShape.DATA_LIST
    assert classify({"data": {"content": ITEMS}})[0] is EnvelopeShape.DATA_CONTENT_LIST
    assert classify({"data": {"id": 1}})[0] is EnvelopeShape.UNRECOGNIZED
    assert classify("oops") == (EnvelopeShape.UNRECOGNIZED, [])


def test_all_envelopes_load_identical_snapshots():
    payloads = [ITEMS, {"content": ITEMS}, {"data": ITEMS}, {"data": {"content": ITEMS}}]
    snapshots = []
    for payload in payloads:
        store = TaskStore(TaskRepository(StubGateway(payload)))
        assert store.load().ok
        snapshots.append(store.get_all())
    assert all(s == snapshots[0] for s in snapshots)
    assert [t.id for t in snapshots[0]] == ["1", "2", "3"]


def test_unrecognised_envelope_loads_empty():
    store = TaskStore(TaskRepository(StubGateway({"status": "success", "data": None})))
    assert store.load().ok
    assert store.get_all() == []


def test_unwrap_list_returns_copy():
    items = unwrap_list({"data": ITEMS})
    items.append({})
    assert len(ITEMS) == 3


def test_unwrap_item():
    assert unwrap_item({"status": "success", "data": {"id": 3}}) == {"id": 3}
    assert unwrap_item({"id": 4, "title": "bare"}) == {"id": 4, "title": "bare"}
    assert unwrap_item({"status": "success", "data": None}) is None
    assert unwrap_item(None) is None


def test_error_message():
    assert error_message({"status": "error", "message": "Title too long"}) == "Title too long"
    assert error_message({"status": "error"}) is None
    assert error_message("  boom ") == "boom"
