"""
Unit tests for tirelife.scheduler and tirelife.locking
"""

# =========================
# Imports
# =========================
import threading
from tirelife.locking import WriteLock
from tirelife.scheduler import RepeatedTimer


# -------------------------
# Tests: RepeatedTimer
# -------------------------
def test_runs_immediately_and_survives_errors():
    calls = []
    done = threading.Event()

    def job():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first run fails")
        done.set()

    timer = RepeatedTimer(0.01, job, run_immediately=True)
    timer.start()
    assert done.wait(2)
    timer.stop()
    assert len(calls) >= 2


def test_stop_without_start():
    RepeatedTimer(60, lambda: None).stop()


# -------------------------
# Tests: WriteLock
# -------------------------
def test_write_lock_creates_directory(tmp_path):
    path = tmp_path / "locks" / "db.lock"
    with WriteLock(str(path)) as lock:
        assert lock.path == str(path)
    assert path.parent.is_dir()
