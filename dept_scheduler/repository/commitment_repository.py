"""Repository layer holding the current commitment collection in memory."""

from __future__ import annotations

from threading import RLock
from typing import Iterable, Optional

from dept_scheduler.domain.models import RawCommitment
from dept_scheduler.utils.config import Settings, get_settings
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)


_DEMO_COMMITMENTS: tuple[RawCommitment, ...] = (
    RawCommitment("Dr. Alice Moreno", "ADM 1300", "Intro to Design", "M", "9:00 AM", "9:50 AM", "Cashion 101", "Fall 2025"),
    RawCommitment("Dr. Alice Moreno", "ADM 1300", "Intro to Design", "W", "9:00 AM", "9:50 AM", "Cashion 101", "Fall 2025"),
    RawCommitment("Dr. Alice Moreno", "ADM 1300", "Intro to Design", "F", "9:00 AM", "9:50 AM", "Cashion 101", "Fall 2025"),
    RawCommitment("Dr. Alice Moreno", "ADM 3310", "Studio Methods", "T", "2:00 PM", "4:30 PM", "Cashion 101; Cashion 102", "Fall 2025"),
    RawCommitment("Dr. Alice Moreno", "ADM 3310", "Studio Methods", "R", "2:00 PM", "4:30 PM", "Cashion 101; Cashion 102", "Fall 2025"),
    RawCommitment("Dr. Ben Okafor", "ID 2320", "Interior Materials", "M", "10:00 AM", "11:15 AM", "Goebel 111", "Fall 2025"),
    RawCommitment("Dr. Ben Okafor", "ID 2320", "Interior Materials", "W", "10:00 AM", "11:15 AM", "Goebel 111", "Fall 2025"),
    RawCommitment("Dr. Ben Okafor", "ID 4350", "Lighting Design", "T", "11:00 AM", "12:15 PM", "Goebel 111", "Fall 2025"),
    RawCommitment("Dr. Ben Okafor", "ID 4350", "Lighting Design", "R", "11:00 AM", "12:15 PM", "Goebel 111", "Fall 2025"),
    RawCommitment("Prof. Carla Wu", "NUTR 1301", "Nutrition Basics", "M", "1:00 PM", "2:15 PM", "Mary Gibbs Jones 204", "Fall 2025"),
    RawCommitment("Prof. Carla Wu", "NUTR 1301", "Nutrition Basics", "W", "1:00 PM", "2:15 PM", "Mary Gibbs Jones 204", "Fall 2025"),
    RawCommitment("Prof. Carla Wu", "NUTR 4V90", "Directed Study", "F", "11:00 AM", "12:00 PM", "Online", "Fall 2025"),
    RawCommitment("Staff", "ADM 1301", "Design Lab", "T", "8:00 AM", "9:15 AM", "Cashion 102", "Fall 2025"),
    RawCommitment("Staff", "ADM 1301", "Design Lab", "R", "8:00 AM", "9:15 AM", "Cashion 102", "Fall 2025"),
    RawCommitment("Staff - TBD", "ID 1310", "Drafting", "W", "3:00 PM", "4:15 PM", "TBA", "Fall 2025"),
)


class CommitmentRepository:
    """Thread-safe holder of the commitment collection and its version stamp.

    Every replacement or append bumps ``version`` so readers can memoize
    derived views without comparing collections.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._lock = RLock()
        self._commitments: tuple[RawCommitment, ...] = ()
        self._version = 0

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def snapshot(self) -> tuple[int, tuple[RawCommitment, ...]]:
        """Return version and collection read under one lock."""
        with self._lock:
            return self._version, self._commitments

    def list_commitments(self) -> tuple[RawCommitment, ...]:
        with self._lock:
            return self._commitments

    def count(self) -> int:
        with self._lock:
            return len(self._commitments)

    def replace_all(self, records: Iterable[RawCommitment]) -> int:
        new_records = tuple(records)
        with self._lock:
            self._commitments = new_records
            self._version += 1
            version = self._version
        logger.info("Commitments replaced | count=%s | version=%s", len(new_records), version)
        return version

    def add(self, records: Iterable[RawCommitment]) -> int:
        new_records = tuple(records)
        with self._lock:
            self._commitments = self._commitments + new_records
            self._version += 1
            version = self._version
        logger.info("Commitments appended | count=%s | version=%s", len(new_records), version)
        return version

    def clear(self) -> int:
        return self.replace_all(())

    def seed_demo_data(self) -> int:
        """Seed a small deterministic department only when the store is empty."""
        if not self._settings.seed_demo_data:
            logger.info("Demo seed disabled by configuration")
            return 0
        with self._lock:
            if self._commitments:
                logger.info("Commitments already present; skipping demo seed")
                return 0
            self.replace_all(_DEMO_COMMITMENTS)
        logger.info("Demo seed completed with %s commitments", len(_DEMO_COMMITMENTS))
        return len(_DEMO_COMMITMENTS)
