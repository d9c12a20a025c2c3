import threading
from datetime import datetime

import streamlit as st


# =============================
#     GLOBAL TRAINING LOCK
# =============================
# Every streamlit session runs on its own thread and a Network is
# mutated sample after sample: a single training at a time, process-wide.


class TrainingLock(object):
    """Non-blocking mutex plus the time it was taken."""

    def __init__(self):
        self._mutex = threading.Lock()
        self.owner = None

    def acquire(self):
        if not self._mutex.acquire(blocking=False):
            return False
        self.owner = datetime.now().isoformat()
        return True

    def release(self):
        if not self._mutex.locked():
            return
        self.owner = None
        self._mutex.release()

    def locked(self):
        return self._mutex.locked()


@st.cache_resource
def get_training_lock():
    """Single TrainingLock shared by every session of the server."""
    return TrainingLock()


def try_acquire_lock():
    """False if a training is already running."""
    return get_training_lock().acquire()


def release_lock():
    get_training_lock().release()


def is_training_in_progress():
    return get_training_lock().locked()
