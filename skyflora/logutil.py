import os
import threading
import multiprocessing

from skyflora import config


def log(scope, msg, level="INFO"):
    if level == "DEBUG" and not getattr(config, "LOG_DEBUG", False):
        return
    if scope == "POPULATE" and level == "INFO" and not getattr(config, "LOG_POPULATE", False):
        return
    pid = os.getpid()
    proc = multiprocessing.current_process().name
    thread = threading.current_thread().name
    text = f"[{level} pid{pid} proc{proc} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        # Main process + main thread: default (no color).
        if proc == "MainProcess" and thread != "MainThread":
            # Main process worker thread.
            text = f"\x1b[32m{text}\x1b[0m"
        elif proc != "MainProcess":
            # Scheduler/external process.
            text = f"\x1b[33m{text}\x1b[0m"
    print(text)
