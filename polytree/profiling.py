"""
Opt-in profiling for the growth hot paths.

Recording is off until `profiler.enable()` is called; enabling also registers
a summary table printed at interpreter exit.
"""

import atexit
import time
from collections import defaultdict
from functools import wraps
from typing import Dict, List, Tuple


class Profiler:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self.calls: Dict[str, int] = defaultdict(int)
        self.total_time: Dict[str, float] = defaultdict(float)
        self.enabled = False
        self._exit_hook = False

    def enable(self, report_at_exit: bool = True):
        self.enabled = True
        if report_at_exit and not self._exit_hook:
            atexit.register(self.print_stats)
            self._exit_hook = True

    def disable(self):
        self.enabled = False

    def record(self, name: str, elapsed: float):
        if not self.enabled:
            return
        self.calls[name] += 1
        self.total_time[name] += elapsed

    def summary(self) -> List[Tuple[str, int, float]]:
        """(name, calls, total seconds), slowest first."""
        rows = [(name, self.calls[name], self.total_time[name]) for name in self.calls]
        return sorted(rows, key=lambda row: row[2], reverse=True)

    def print_stats(self):
        rows = self.summary()
        if not rows:
            return

        print("\n" + "=" * 70)
        print("GROWTH PROFILE")
        print("=" * 70)
        print(f"{'Function':<35} {'Calls':>10} {'Total(s)':>10} {'Avg(ms)':>10}")
        print("-" * 70)
        for name, calls, total in rows:
            avg_ms = total / calls * 1000 if calls else 0.0
            print(f"{name:<35} {calls:>10} {total:>10.3f} {avg_ms:>10.3f}")
        print("=" * 70)

    def reset(self):
        self.calls.clear()
        self.total_time.clear()


profiler = Profiler()


def profile(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not profiler.enabled:
            return func(*args, **kwargs)
        start = time.perf_counter()
        result = func(*args, **kwargs)
        profiler.record(func.__qualname__, time.perf_counter() - start)
        return result
    return wrapper


class profile_block:
    def __init__(self, name: str):
        self.name = name
        self.start = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        profiler.record(self.name, time.perf_counter() - self.start)
