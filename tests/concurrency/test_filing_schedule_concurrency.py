"""
Filing schedule generation across threads.

Each worker gets its own Session on a file-backed SQLite database, so these
tests bypass the shared per-test session fixture.

Validates:
- Every thread resolves the same per-year generation lock
- A generator blocks while another holder owns the year lock
- Generation after the lock is released happens exactly once
"""

from concurrent.futures import ThreadPoolExecutor, wait
from threading import Barrier

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from academy_kernel.db.base import Base
from academy_kernel.db.engine import _enable_sqlite_savepoints
from academy_modules._orm_registry import import_all_orm_models
from academy_modules.filing.orm import FilingObligationModel
from academy_modules.filing.service import FilingScheduleService, _lock_for_year

pytestmark = pytest.mark.concurrency

WORKERS = 8


@pytest.fixture
def file_engine(tmp_path):
    import_all_orm_models()
    engine = create_engine(
        f"sqlite:///{tmp_path / 'filing.db'}",
        connect_args={"check_same_thread": False},
    )
    _enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


def _ensure_and_commit(engine, year):
    with Session(engine) as session:
        schedule = FilingScheduleService(session).ensure_filing_schedule(year)
        session.commit()
        return schedule


def _row_count(engine, year):
    with Session(engine) as session:
        return session.execute(
            select(func.count())
            .select_from(FilingObligationModel)
            .where(FilingObligationModel.year == year)
        ).scalar_one()


class TestYearLock:

    def test_same_lock_from_every_thread(self):
        barrier = Barrier(WORKERS)

        def resolve():
            barrier.wait(timeout=10)
            return _lock_for_year(2031)

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            locks = [f.result(timeout=10) for f in [pool.submit(resolve) for _ in range(WORKERS)]]

        assert all(lock is locks[0] for lock in locks)
        assert _lock_for_year(2032) is not locks[0]

    def test_generation_waits_for_year_lock(self, file_engine):
        lock = _lock_for_year(2033)

        with ThreadPoolExecutor(max_workers=1) as pool:
            lock.acquire()
            try:
                future = pool.submit(_ensure_and_commit, file_engine, 2033)
                done, _ = wait([future], timeout=0.3)
                assert not done
                assert _row_count(file_engine, 2033) == 0
            finally:
                lock.release()

            schedule = future.result(timeout=10)

        assert len(schedule) == 17
        assert _row_count(file_engine, 2033) == 17

    def test_later_threads_read_back_schedule(self, file_engine):
        with ThreadPoolExecutor(max_workers=1) as pool:
            first = pool.submit(_ensure_and_commit, file_engine, 2034).result(timeout=10)
            second = pool.submit(_ensure_and_commit, file_engine, 2034).result(timeout=10)

        assert [o.id for o in second] == [o.id for o in first]
        assert _row_count(file_engine, 2034) == 17
