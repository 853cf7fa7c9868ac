from __future__ import annotations

import threading
import time

import pytest

from src.campus_system.campus_system.core.exceptions import NotFoundError
from src.campus_system.campus_system.database.locks import EntityLocks
from src.campus_system.campus_system.main import create_app


def test_lock_is_dropped_after_release():
    locks = EntityLocks()
    with locks.hold("fee_record", "r1"):
        assert len(locks) == 1
    assert len(locks) == 0


def test_lock_is_dropped_when_body_raises():
    locks = EntityLocks()
    with pytest.raises(RuntimeError):
        with locks.hold("qr_session", "s1"):
            raise RuntimeError("boom")
    assert len(locks) == 0


def test_waiters_share_one_lock_until_the_last_leaves():
    locks = EntityLocks()
    inside = []
    started = threading.Event()

    def worker():
        started.wait()
        with locks.hold("qr_session", "s1"):
            inside.append(1)
            assert len(inside) == 1
            time.sleep(0.01)
            inside.pop()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    started.set()
    for t in threads:
        t.join()

    assert len(locks) == 0


def test_unknown_ids_leave_no_locks_behind():
    container = create_app("config.testing").extensions["campus_container"]

    for i in range(50):
        with pytest.raises(NotFoundError):
            container.qr_service.end(f"missing-{i}")
        with pytest.raises(NotFoundError):
            container.fee_service.record_payment(f"missing-{i}", amount=1)

    assert len(container.locks) == 0
