"""Tests for ReadWriteLock."""

import threading
import time

from teamquiz.locks import ReadWriteLock


class TestReadWriteLock:
    """Tests for reader/writer exclusion."""

    def test_readers_share(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=5)

        def reader() -> None:
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)
        assert not any(t.is_alive() for t in threads)

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events: list[str] = []
        writer_in = threading.Event()

        def writer() -> None:
            with lock.write():
                writer_in.set()
                time.sleep(0.05)
                events.append("write done")

        def reader() -> None:
            writer_in.wait()
            with lock.read():
                events.append("read")

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)
        assert events == ["write done", "read"]

    def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        events: list[str] = []
        first_reader_in = threading.Event()
        release_first = threading.Event()

        def first_reader() -> None:
            with lock.read():
                first_reader_in.set()
                release_first.wait(5)
                events.append("first read")

        def writer() -> None:
            with lock.write():
                events.append("write")

        def late_reader() -> None:
            with lock.read():
                events.append("late read")

        t1 = threading.Thread(target=first_reader)
        t1.start()
        first_reader_in.wait(5)
        t2 = threading.Thread(target=writer)
        t2.start()
        while not lock._writers_waiting:
            time.sleep(0.001)
        t3 = threading.Thread(target=late_reader)
        t3.start()
        time.sleep(0.05)
        release_first.set()
        for t in (t1, t2, t3):
            t.join(5)
        assert events == ["first read", "write", "late read"]

    def test_released_after_exception(self):
        lock = ReadWriteLock()
        try:
            with lock.write():
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        with lock.read():
            pass
        with lock.write():
            pass
