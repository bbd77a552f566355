# complaint_controller.py
import logging

from errors import StoreError, Unauthenticated, ValidationError
from models import AdminProfile, parse_complaints, validate_feedback, visible_complaints

logger = logging.getLogger(__name__)


def run_inline(func, done):
    """Synchronous stand-in for ui.run_thread: call func, hand the outcome to done."""
    try:
        res = func()
    except Exception as e:
        done(None, e)
    else:
        done(res, None)


def post_inline(fn):
    fn()


class ComplaintListController:
    """
    Feeds the admin complaint list and relays feedback edits to the store.

    `run(func, done)` executes a blocking store call away from the UI thread
    and calls done(result, exc) back on it; `post(fn)` schedules fn on the UI
    thread. Both default to inline versions.

    The controller owns at most one live complaint subscription. Every
    initialize() / teardown() bumps `_generation`; callbacks carrying an older
    generation belong to a released subscription or a superseded profile read
    and are dropped.
    """

    def __init__(self, store, auth, view, run=run_inline, post=post_inline):
        self.store = store
        self.auth = auth
        self.view = view
        self.run = run
        self.post = post
        self.profile = None
        self._subscription = None
        self._generation = 0

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None

    # ---------- loading ----------
    def initialize(self, current_user_id=None) -> bool:
        uid = current_user_id
        if not uid:
            try:
                uid = self.auth.require_user_id()
            except Unauthenticated as e:
                self.view.notify(str(e), "warning")
                return False

        self._detach()
        self._generation += 1
        gen = self._generation

        def done(doc, exc):
            if gen != self._generation:
                return
            if exc:
                logger.error("Loading profile for %s failed: %s", uid, exc)
                self.view.notify(f"Error loading user: {exc}", "danger")
                return
            self.profile = AdminProfile.from_doc(doc)
            logger.info("Profile %s: role=%s department=%s", uid, self.profile.role, self.profile.department.value)
            self._attach(gen)

        self.run(lambda: self.store.get_user_profile(uid), done)
        return True

    def _attach(self, gen):
        self._detach()
        try:
            self._subscription = self.store.subscribe_complaints(
                on_snapshot=lambda records: self.post(lambda: self._on_snapshot(gen, records)),
                on_error=lambda exc: self.post(lambda: self._on_error(gen, exc)),
            )
        except StoreError as e:
            self._on_error(gen, e)

    def _detach(self):
        sub, self._subscription = self._subscription, None
        if sub is not None:
            sub.close()
            logger.debug("Complaint listener released")

    def _on_snapshot(self, gen, records):
        if gen != self._generation:
            return
        self.on_complaints_changed(records)

    def _on_error(self, gen, exc):
        if gen != self._generation:
            return
        logger.error("Complaint listener error: %s", exc)
        self.view.notify(f"Error loading complaints: {exc}", "danger")

    def on_complaints_changed(self, records):
        """Recompute the visible list from a full collection snapshot."""
        profile = self.profile or AdminProfile()
        self.view.render(visible_complaints(parse_complaints(records), profile))

    # ---------- feedback ----------
    def submit_feedback(self, complaint_id, feedback_text):
        try:
            text = validate_feedback(feedback_text)
        except ValidationError as e:
            self.view.notify(str(e), "warning")
            return

        def done(_, exc):
            if exc:
                self.view.notify(f"Error submitting feedback: {exc}", "danger")
                return
            logger.info("Feedback saved on %s", complaint_id)
            self.view.notify("Feedback submitted successfully", "success")

        self.run(lambda: self.store.set_feedback(complaint_id, text), done)

    def teardown(self):
        self._generation += 1
        self._detach()
