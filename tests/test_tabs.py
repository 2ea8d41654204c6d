from conftest import make_task


def test_open_appends_and_activates(tabs):
    assert tabs.open("A")
    assert tabs.open("B")
    assert tabs.open("A")
    assert tabs.open_ids == ["A", "B"]
    assert tabs.active_id == "A"


def test_open_unknown_id_is_noop(tabs):
    assert tabs.open("missing") is False
    assert tabs.open_ids == []
    assert tabs.active_id is None


def test_activate_requires_open_tab(tabs):
    tabs.open("A")
    assert tabs.activate("B") is False
    assert tabs.active_id == "A"


def test_close_active_selects_previous(tabs):
    for task_id in ("A", "B", "C"):
        tabs.open(task_id)
    tabs.activate("B")
    tabs.close("B")
    assert tabs.open_ids == ["A", "C"]
    assert tabs.active_id == "A"


def test_close_first_active_selects_new_first(tabs):
    for task_id in ("A", "B", "C"):
        tabs.open(task_id)
    tabs.activate("A")
    tabs.close("A")
    assert tabs.active_id == "B"


def test_close_last_tab_clears_selection(tabs):
    tabs.open("A")
    tabs.close("A")
    assert tabs.open_ids == []
    assert tabs.active_id is None


def test_close_inactive_keeps_selection(tabs):
    for task_id in ("A", "B", "C"):
        tabs.open(task_id)
    tabs.close("A")
    assert tabs.active_id == "C"


def test_store_removal_cascades(store, tabs):
    tabs.open("A")
    tabs.open("B")
    store.remove("B")
    assert tabs.open_ids == ["A"]
    assert tabs.active_id == "A"
    assert all(i in store for i in tabs.open_ids)


def test_reload_closes_vanished_tabs(store, tabs, backend):
    tabs.open("A")
    tabs.open("C")
    del backend.tasks["C"]
    store.load()
    assert tabs.open_ids == ["A"]
    assert tabs.active_id == "A"


def test_open_tasks_reflect_store_edits(store, tabs):
    tabs.open("A")
    store.upsert(store.get("A").with_changes(title="Edited"))
    assert tabs.active_task().title == "Edited"
    assert [t.title for t in tabs.open_tasks()] == ["Edited"]


def test_detach_stops_cascade(store, tabs):
    store.upsert(make_task("E"))
    tabs.open("E")
    tabs.detach()
    store.remove("E")
    assert tabs.open_ids == ["E"]
