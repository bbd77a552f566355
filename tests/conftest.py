import pytest

from auth import AuthSession
from errors import StoreReadError, StoreWriteError


class FakeSubscription:
    def __init__(self, on_snapshot, on_error):
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.closed = False
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        self.closed = True


class FakeStore:
    def __init__(self, profiles=None):
        self.profiles = profiles or {}
        self.subscriptions = []
        self.writes = []
        self.profile_reads = []
        self.read_error = None
        self.write_error = None

    def get_user_profile(self, uid):
        self.profile_reads.append(uid)
        if self.read_error:
            raise StoreReadError(self.read_error)
        return self.profiles.get(uid)

    def subscribe_complaints(self, on_snapshot, on_error):
        sub = FakeSubscription(on_snapshot, on_error)
        self.subscriptions.append(sub)
        return sub

    def set_feedback(self, complaint_id, text):
        if self.write_error:
            raise StoreWriteError(self.write_error)
        self.writes.append((complaint_id, text))

    @property
    def active(self):
        return [s for s in self.subscriptions if not s.closed]

    def push(self, records):
        for sub in list(self.subscriptions):
            sub.on_snapshot(records)

    def fail(self, exc):
        for sub in list(self.subscriptions):
            sub.on_error(exc)


class FakeView:
    def __init__(self):
        self.renders = []
        self.notifications = []

    def render(self, complaints):
        self.renders.append(list(complaints))

    def notify(self, message, severity="info"):
        self.notifications.append((message, severity))

    @property
    def last_ids(self):
        return [c.id for c in self.renders[-1]]


@pytest.fixture
def store():
    return FakeStore(profiles={
        "admin": {"role": "admin", "department": "security"},
        "caterer": {"role": "staff", "department": " Catering "},
        "drifter": {"role": "staff"},
    })


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def auth():
    session = AuthSession()
    session.sign_in("caterer", "cat@example.com")
    return session


