import time
from utils.logger import log

class Timer:
    def __init__(self, label="Task"):
        self.label = label
        self.elapsed = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        status = "failed after" if exc_type else "took"
        log(f"[timer] {self.label} {status} {self.elapsed:.2f}s")
