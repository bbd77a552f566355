# complaint_view.py
import logging
from functools import partial

import ttkbootstrap as ttk
from ttkbootstrap.scrolled import ScrolledFrame

from complaint_rows import diff_by_id, feedback_label, format_timestamp
from ui import toast

logger = logging.getLogger(__name__)


class ComplaintRow(ttk.Frame):
    """One complaint card: text, date, current feedback, new-feedback entry."""

    def __init__(self, master, complaint, on_submit):
        super().__init__(master, padding=10, bootstyle="light")
        self.text_label = ttk.Label(self, wraplength=760, justify="left", font=("Segoe UI", 11), bootstyle="inverse-light")
        self.text_label.pack(anchor="w")
        self.date_label = ttk.Label(self, font=("Segoe UI", 9), bootstyle="inverse-light")
        self.date_label.pack(anchor="w", pady=(2, 6))
        self.feedback_label = ttk.Label(self, wraplength=760, justify="left", bootstyle="inverse-light")
        self.feedback_label.pack(anchor="w", pady=(0, 6))

        row = ttk.Frame(self, bootstyle="light"); row.pack(fill="x")
        self.entry = ttk.Entry(row, width=70); self.entry.pack(side="left", fill="x", expand=True)
        self.submit_button = ttk.Button(row, text="Submit Feedback", bootstyle="primary", command=on_submit)
        self.submit_button.pack(side="left", padx=8)
        self.bind_complaint(complaint)

    def bind_complaint(self, complaint):
        self.complaint = complaint
        self.text_label.config(text=complaint.text)
        self.date_label.config(text=f"{format_timestamp(complaint.timestamp)}  |  {complaint.department.value}")
        self.feedback_label.config(text=f"Feedback: {feedback_label(complaint)}")
        # always a blank box for composing new feedback
        self.entry.delete(0, "end")


class ComplaintListView(ttk.Frame):
    """
    Scrollable list of complaint rows. Rows are keyed by complaint id, so a
    new snapshot only touches rows that were added, removed or changed.
    """

    def __init__(self, master, on_submit_feedback=None, on_status=None):
        super().__init__(master)
        self.on_submit_feedback = on_submit_feedback
        self.on_status = on_status
        self._rendered = []
        self._rows = {}

        self.count_var = ttk.StringVar(value="Loading complaints...")
        ttk.Label(self, textvariable=self.count_var, bootstyle="secondary").pack(anchor="w", pady=(0, 6))
        self.body = ScrolledFrame(self, autohide=True)
        self.body.pack(fill="both", expand=True)
        self.empty_label = ttk.Label(self.body, text="No complaints to show.", bootstyle="secondary")

    def render(self, complaints):
        diff = diff_by_id(self._rendered, complaints)
        by_id = {c.id: c for c in complaints}

        for cid in diff.removed:
            self._rows.pop(cid).destroy()
        for cid in diff.added:
            self._rows[cid] = ComplaintRow(self.body, by_id[cid], partial(self._submit, cid))
        for cid in diff.changed:
            self._rows[cid].bind_complaint(by_id[cid])
        if diff.reordered:
            for cid in diff.order:
                self._rows[cid].pack_forget()
            for cid in diff.order:
                self._rows[cid].pack(fill="x", padx=4, pady=4)

        self._rendered = list(complaints)
        if complaints:
            self.empty_label.pack_forget()
        else:
            self.empty_label.pack(anchor="w", pady=12)
        self.count_var.set(f"{len(complaints)} complaint(s)")
        logger.debug("Rendered %d rows (+%d -%d ~%d)", len(complaints), len(diff.added), len(diff.removed), len(diff.changed))

    def _submit(self, complaint_id):
        row = self._rows.get(complaint_id)
        if row is None or self.on_submit_feedback is None:
            return
        self.on_submit_feedback(complaint_id, row.entry.get().strip())

    def notify(self, message, severity="info"):
        toast(self.winfo_toplevel(), message, bootstyle=severity)
        if self.on_status:
            self.on_status(message, severity)
