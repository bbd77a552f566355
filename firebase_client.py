# firebase_client.py
import copy
import logging
import threading

import firebase_admin
from firebase_admin import credentials, db as rtdb, exceptions as fb_exceptions, firestore
from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as google_auth_exceptions

from errors import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

STORE_ERRORS = (
    fb_exceptions.FirebaseError,
    api_exceptions.GoogleAPIError,
    google_auth_exceptions.GoogleAuthError,
)


# -------------------------------------------------------
# FIREBASE ADMIN INITIALIZATION
# -------------------------------------------------------
def init_app(settings):
    if not firebase_admin._apps:
        cred = credentials.Certificate(settings.service_account_path)
        options = {"databaseURL": settings.database_url} if settings.database_url else None
        firebase_admin.initialize_app(cred, options)
        logger.info("Firebase initialised from %s", settings.service_account_path)


def open_store(settings):
    """Build the complaint store for the configured backend."""
    init_app(settings)
    if settings.backend == "rtdb":
        return RealtimeComplaintStore(
            rtdb.reference("/"), settings.users_collection, settings.complaints_collection
        )
    return FirestoreComplaintStore(
        firestore.client(), settings.users_collection, settings.complaints_collection
    )


# -------------------------------------------------------
# SUBSCRIPTION HANDLES
# -------------------------------------------------------
class Subscription:
    """Handle for one live listener. close() may be called any number of times."""

    def __init__(self, close_fn):
        self._close_fn = close_fn
        self.closed = False

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._close_fn()


class FirestoreSubscription(Subscription):
    """
    Wraps a Firestore Watch. The Watch shuts itself down when its stream dies
    and has no error callback, so we poll is_active and report the loss.
    """

    POLL_SECONDS = 15.0

    def __init__(self, watch, on_error, poll_seconds=None):
        super().__init__(watch.unsubscribe)
        self.watch = watch
        self.on_error = on_error
        self.poll_seconds = poll_seconds or self.POLL_SECONDS
        self._timer = None

    def check_health(self) -> bool:
        if self.closed:
            return False
        if self.watch.is_active:
            return True
        logger.error("Complaint listener stopped unexpectedly")
        self.closed = True
        self.on_error(StoreReadError("connection to the complaint store was lost"))
        return False

    def start_health_checks(self):
        def tick():
            if self.check_health():
                self.start_health_checks()

        self._timer = threading.Timer(self.poll_seconds, tick)
        self._timer.daemon = True
        self._timer.start()

    def close(self):
        if self._timer is not None:
            self._timer.cancel()
        super().close()


# -------------------------------------------------------
# FIRESTORE BACKEND
# -------------------------------------------------------
class FirestoreComplaintStore:
    def __init__(self, client, users_collection="users", complaints_collection="complaints"):
        self.client = client
        self.users_collection = users_collection
        self.complaints_collection = complaints_collection

    def get_user_profile(self, uid: str):
        try:
            doc = self.client.collection(self.users_collection).document(uid).get()
        except STORE_ERRORS as e:
            logger.error("Reading profile %s failed: %s", uid, e)
            raise StoreReadError(str(e)) from e
        return doc.to_dict() if doc.exists else None

    def subscribe_complaints(self, on_snapshot, on_error, health_checks=True):
        """
        on_snapshot gets {complaint_id: fields} for the whole collection on
        every change, in document-id order.
        """
        def callback(docs, changes, read_time):
            on_snapshot({d.id: d.to_dict() for d in docs})

        try:
            watch = self.client.collection(self.complaints_collection).on_snapshot(callback)
        except STORE_ERRORS as e:
            raise StoreReadError(str(e)) from e
        sub = FirestoreSubscription(watch, on_error)
        if health_checks:
            sub.start_health_checks()
        logger.debug("Listening on %s", self.complaints_collection)
        return sub

    def set_feedback(self, complaint_id: str, text: str):
        try:
            self.client.collection(self.complaints_collection).document(complaint_id).update(
                {"feedback": text}
            )
        except STORE_ERRORS as e:
            logger.error("Writing feedback for %s failed: %s", complaint_id, e)
            raise StoreWriteError(str(e)) from e


# -------------------------------------------------------
# REALTIME DATABASE BACKEND
# -------------------------------------------------------
def _as_children(value):
    """
    Realtime Database hands back a list when child keys are 0, 1, 2...;
    turn it back into a key -> child mapping.
    """
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        return {str(i): v for i, v in enumerate(value) if v is not None}
    if value is not None:
        logger.warning("Ignoring non-collection value of type %s at listener root", type(value).__name__)
    return {}


class SnapshotMirror:
    """
    Local copy of a Realtime Database subtree, kept current from listen()
    events so every callback can see the whole collection.
    """

    def __init__(self):
        self.data = {}

    def apply(self, event_type, path, data):
        if event_type == "put":
            self._set(path, data)
        elif event_type == "patch":
            if not isinstance(data, dict):
                raise ValueError(f"patch at {path!r} carried {type(data).__name__}")
            for key, value in data.items():
                self._set(f"{path.rstrip('/')}/{key}", value)
        else:
            raise ValueError(f"unknown event type {event_type!r}")

    def _set(self, path, value):
        parts = [p for p in path.split("/") if p]
        if not parts:
            self.data = _as_children(value)
            return
        node = self.data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                if value is None:
                    return
                child = node[part] = {}
            node = child
        if value is None:
            node.pop(parts[-1], None)
        else:
            node[parts[-1]] = value

    def snapshot(self):
        return {key: copy.deepcopy(self.data[key]) for key in sorted(self.data)}


class RealtimeComplaintStore:
    def __init__(self, root_ref, users_path="users", complaints_path="complaints"):
        self.root = root_ref
        self.users_path = users_path
        self.complaints_path = complaints_path

    def get_user_profile(self, uid: str):
        try:
            value = self.root.child(self.users_path).child(uid).get()
        except STORE_ERRORS as e:
            logger.error("Reading profile %s failed: %s", uid, e)
            raise StoreReadError(str(e)) from e
        return value if isinstance(value, dict) else None

    def subscribe_complaints(self, on_snapshot, on_error):
        mirror = SnapshotMirror()

        def listener(event):
            try:
                mirror.apply(event.event_type, event.path, event.data)
            except ValueError as e:
                logger.error("Bad listener event: %s", e)
                on_error(StoreReadError(str(e)))
                return
            on_snapshot(mirror.snapshot())

        try:
            registration = self.root.child(self.complaints_path).listen(listener)
        except STORE_ERRORS as e:
            raise StoreReadError(str(e)) from e
        return Subscription(registration.close)

    def set_feedback(self, complaint_id: str, text: str):
        try:
            self.root.child(self.complaints_path).child(complaint_id).child("feedback").set(text)
        except STORE_ERRORS as e:
            logger.error("Writing feedback for %s failed: %s", complaint_id, e)
            raise StoreWriteError(str(e)) from e
