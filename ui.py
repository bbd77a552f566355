# ui.py
import logging
import threading
import tkinter as tk

import ttkbootstrap as ttk

logger = logging.getLogger(__name__)


# ------------------------------
# Utilities
# ------------------------------
def center(win, w=1100, h=700):
    try:
        win.update_idletasks()
        sw, sh = win.winfo_screenwidth(), win.winfo_screenheight()
        x, y = (sw - w) // 2, (sh - h) // 2
        win.geometry(f"{w}x{h}+{x}+{y}")
    except tk.TclError:
        pass


def toast(parent, msg, bootstyle="secondary", d=2200):
    try:
        t = tk.Toplevel(parent)
    except tk.TclError:
        return
    t.overrideredirect(True); t.attributes("-topmost", True)
    f = ttk.Frame(t, padding=10, bootstyle=bootstyle); f.pack()
    ttk.Label(f, text=msg, bootstyle=f"inverse-{bootstyle}").pack()
    t.update_idletasks()
    x = t.winfo_screenwidth() - t.winfo_reqwidth() - 20
    y = t.winfo_screenheight() - t.winfo_reqheight() - 50
    t.geometry(f"+{x}+{y}")
    t.after(d, t.destroy)


def loader(parent, text="Please wait..."):
    try:
        L = tk.Toplevel(parent)
    except tk.TclError:
        return None
    L.title(""); L.geometry("300x100"); L.resizable(False, False)
    L.attributes("-topmost", True); L.grab_set()
    f = ttk.Frame(L, padding=12); f.pack(expand=True, fill="both")
    ttk.Label(f, text=text).pack(pady=(0, 8))
    p = ttk.Progressbar(f, mode="indeterminate", bootstyle="info")
    p.pack(fill="x"); p.start(10); L.update()
    return L


def close_quietly(win):
    if win is None:
        return
    try:
        win.destroy()
    except tk.TclError:
        pass


def window_alive(win) -> bool:
    try:
        return win is not None and bool(win.winfo_exists())
    except tk.TclError:
        return False


def post(win, fn):
    """Run fn on the Tk main loop; dropped if the window is gone."""
    def cb():
        if window_alive(win):
            fn()
    try:
        win.after(0, cb)
    except (tk.TclError, RuntimeError):
        logger.debug("Window gone, dropping callback")


def run_thread(win, func, done=None):
    def worker():
        res, exc = None, None
        try:
            res = func()
        except Exception as e:
            exc = e

        def cb():
            if done:
                try:
                    done(res, exc)
                except Exception:
                    logger.exception("Error in done callback")
        post(win, cb)

    threading.Thread(target=worker, daemon=True).start()
