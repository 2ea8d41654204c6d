from taskflow import theme


def test_set_theme():
    try:
        theme.set_theme(page_title="Board", page_icon="📋")
    except Exception as e:
        assert False, f"set_theme raised an exception: {e}"


def test_badges_use_status_colors():
    html = theme.status_badge("DONE", "Done")
    assert theme.STATUS_COLORS["DONE"] in html
    assert ">Done<" in html
    assert "#636e72" in theme.priority_badge("URGENT")
