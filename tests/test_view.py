import pytest

tk = pytest.importorskip("tkinter")
ttk = pytest.importorskip("ttkbootstrap")

from complaint_rows import NO_FEEDBACK  # noqa: E402
from complaint_view import ComplaintListView  # noqa: E402
from models import Complaint, Department  # noqa: E402


def make(cid, ts, feedback=None):
    return Complaint(id=cid, author_id="u", text=f"text {cid}", timestamp=ts,
                     department=Department.CATERING, feedback=feedback)


@pytest.fixture(scope="module")
def window():
    try:
        win = ttk.Window(themename="cosmo")
    except tk.TclError as e:
        pytest.skip(f"no display: {e}")
    win.withdraw()
    yield win
    win.destroy()


@pytest.fixture
def submitted():
    return []


@pytest.fixture
def view(window, submitted):
    v = ComplaintListView(window, on_submit_feedback=lambda cid, text: submitted.append((cid, text)))
    v.pack()
    yield v
    v.destroy()


def type_into(row, text):
    row.entry.delete(0, "end")
    row.entry.insert(0, text)


def test_submit_trims_and_uses_row_id(view, submitted):
    view.render([make("C2", 20), make("C1", 10)])
    type_into(view._rows["C1"], "  Great job  ")
    view._rows["C1"].submit_button.invoke()
    assert submitted == [("C1", "Great job")]


def test_submit_passes_empty_text_through(view, submitted):
    view.render([make("C1", 10)])
    view._rows["C1"].submit_button.invoke()
    assert submitted == [("C1", "")]


def test_new_rows_start_empty_and_show_placeholder(view):
    view.render([make("A", 2), make("B", 1, feedback="Sorted")])
    a, b = view._rows["A"], view._rows["B"]
    assert a.entry.get() == "" and b.entry.get() == ""
    assert NO_FEEDBACK in a.feedback_label.cget("text")
    assert "Sorted" in b.feedback_label.cget("text")
    assert view.count_var.get() == "2 complaint(s)"


def test_changing_one_row_keeps_typing_in_others(view):
    view.render([make("A", 2), make("B", 1)])
    row_a, row_b = view._rows["A"], view._rows["B"]
    type_into(row_a, "half-written reply")
    type_into(row_b, "draft for B")

    view.render([make("A", 2), make("B", 1, feedback="Thanks")])

    assert view._rows["A"] is row_a
    assert row_a.entry.get() == "half-written reply"
    assert row_b.entry.get() == ""
    assert "Thanks" in row_b.feedback_label.cget("text")


def test_removed_rows_are_destroyed(view):
    view.render([make("A", 2), make("B", 1)])
    row_b = view._rows["B"]
    type_into(view._rows["A"], "keep me")

    view.render([make("A", 2)])

    assert "B" not in view._rows
    assert not row_b.winfo_exists()
    assert view._rows["A"].entry.get() == "keep me"
    assert view.count_var.get() == "1 complaint(s)"


def test_new_row_on_top_is_packed_first(view):
    view.render([make("A", 1)])
    view.render([make("Z", 9), make("A", 1)])
    view.update_idletasks()
    packed = [w for w in view.body.pack_slaves() if w in view._rows.values()]
    assert packed == [view._rows["Z"], view._rows["A"]]
