# admin_app.py
"""
CRTS Admin Feedback Desk (Cosmo theme)
Run: python admin_app.py
Requires: pip install ttkbootstrap firebase-admin requests python-dotenv

Staff sign in, see the complaints of their department (admins see all)
and attach feedback to them.
"""

import logging
import tkinter as tk

import ttkbootstrap as ttk
from ttkbootstrap.dialogs import Messagebox

from auth import AuthSession, auth_error_message
from complaint_controller import ComplaintListController
from complaint_view import ComplaintListView
from config import load_settings
from errors import ConfigError
from firebase_client import open_store
from ui import center, close_quietly, loader, post, run_thread

logger = logging.getLogger(__name__)


class AdminApp:
    def __init__(self, settings, store, root=None):
        self.settings = settings
        self.store = store
        self.auth = AuthSession()
        self.root = root or tk.Tk()
        self.root.withdraw()
        self.style = ttk.Style(settings.theme)
        self.login_win = None
        self.main_win = None
        self.controller = None

    # ------------------------------
    # Login window
    # ------------------------------
    def open_login(self):
        close_quietly(self.login_win)
        w = tk.Toplevel(self.root); self.login_win = w
        w.title("CRTS Admin Login"); center(w, 480, 260); w.resizable(False, False)

        f = ttk.Frame(w, padding=18); f.pack(fill="both", expand=True)
        ttk.Label(f, text="CRTS Complaint Feedback", font=("Segoe UI", 14, "bold")).grid(row=0, column=0, columnspan=2, pady=10)

        ttk.Label(f, text="Email:").grid(row=1, column=0, sticky="w")
        e_email = ttk.Entry(f, width=38); e_email.grid(row=1, column=1, pady=5)
        ttk.Label(f, text="Password:").grid(row=2, column=0, sticky="w")
        e_pwd = ttk.Entry(f, width=38, show="*"); e_pwd.grid(row=2, column=1, pady=5)

        def login(event=None):
            email = e_email.get().strip(); pwd = e_pwd.get().strip()
            if not email or not pwd:
                Messagebox.show_error("Email & Password required.", parent=w); return
            L = loader(w, "Signing in...")
            def work(): return self.auth.sign_in_with_password(self.settings.api_key, email, pwd)
            def done(res, exc):
                close_quietly(L)
                if exc:
                    logger.warning("Sign-in failed for %s: %s", email, exc)
                    Messagebox.show_error(auth_error_message(exc), parent=w); return
                close_quietly(w)
                self.open_main()
            run_thread(w, work, done)

        ttk.Button(f, text="Login", bootstyle="primary", command=login).grid(row=3, column=1, sticky="e", pady=12)
        e_pwd.bind("<Return>", login)
        w.protocol("WM_DELETE_WINDOW", self.quit)

    # ------------------------------
    # Complaint area
    # ------------------------------
    def open_main(self):
        close_quietly(self.main_win)
        w = tk.Toplevel(self.root); self.main_win = w
        w.title("CRTS — Complaints"); center(w, 1000, 720)

        top = ttk.Frame(w, padding=10); top.pack(fill="x")
        ttk.Label(top, text=f"Signed in as {self.auth.email}", font=("Segoe UI", 10)).pack(side="left")
        ttk.Button(top, text="Back", bootstyle="outline-secondary", command=self.back).pack(side="right")

        status_bar = ttk.Label(w, text="Ready", anchor="w", bootstyle="secondary")
        status_bar.pack(side="bottom", fill="x")
        def set_status(msg, style="secondary"):
            try: status_bar.config(text=msg, bootstyle=f"inverse-{style}")
            except tk.TclError: status_bar.config(text=msg)

        content = ttk.Frame(w, padding=10); content.pack(fill="both", expand=True)
        ttk.Label(content, text="Complaints", font=("Segoe UI", 14, "bold")).pack(anchor="w", pady=(0, 6))
        view = ComplaintListView(content, on_status=set_status)
        view.pack(fill="both", expand=True)

        self.controller = ComplaintListController(
            self.store, self.auth, view,
            run=lambda func, done: run_thread(w, func, done),
            post=lambda fn: post(w, fn),
        )
        view.on_submit_feedback = self.controller.submit_feedback
        w.protocol("WM_DELETE_WINDOW", self.back)
        self.controller.initialize()

    def back(self):
        if self.controller:
            self.controller.teardown()
            self.controller = None
        close_quietly(self.main_win); self.main_win = None
        self.auth.sign_out()
        self.open_login()

    def quit(self):
        if self.controller:
            self.controller.teardown()
        close_quietly(self.login_win)
        close_quietly(self.root)

    def run(self):
        self.open_login()
        self.root.mainloop()


def main():
    try:
        settings = load_settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Bad configuration: %s", e)
        raise SystemExit(2)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = open_store(settings)
    AdminApp(settings, store).run()


# Entry point
if __name__ == "__main__":
    main()
