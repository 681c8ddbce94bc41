"""
KeyedLock tests.
"""

import threading
import time

from src.core.concurrency import KeyedLock


class TestKeyedLock:

    def test_entries_dropped_after_release(self):
        locks = KeyedLock()
        with locks.hold("app-1"):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_same_key_is_serialized(self):
        locks = KeyedLock()
        order = []

        def worker(name):
            with locks.hold("app-1"):
                order.append(f"{name}:in")
                time.sleep(0.02)
                order.append(f"{name}:out")

        threads = [threading.Thread(target=worker, args=(n,)) for n in ("a", "b")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert order[0].endswith(":in") and order[1].endswith(":out")
        assert order[0].split(":")[0] == order[1].split(":")[0]
        assert len(locks) == 0

    def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        with locks.hold("app-1"):
            acquired = threading.Event()

            def other():
                with locks.hold("app-2"):
                    acquired.set()

            t = threading.Thread(target=other)
            t.start()
            assert acquired.wait(timeout=1)
            t.join()
