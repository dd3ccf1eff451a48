from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
import logging
import random
from threading import Lock
from time import perf_counter

from sqlalchemy import text
from sqlalchemy.orm import Session

from timetabler.core.config import Settings, get_settings
from timetabler.core.exceptions import ConfigurationError, GenerationInProgressError
from timetabler.models.timetable_entry import TimetableEntry
from timetabler.services.audit import log_activity
from timetabler.services.availability_grid import AvailabilityGrid
from timetabler.services.catalog import load_generation_inputs
from timetabler.services.persistence import replace_section_entries
from timetabler.services.time_grid import WeeklyGrid
from timetabler.services.timetable_scheduler import CoverageItem, SectionSnapshot, TimetableScheduler

logger = logging.getLogger(__name__)

# Arbitrary constant shared by every process generating against the same database.
GENERATION_ADVISORY_LOCK_KEY = 7_351_204

_generation_lock = Lock()


@dataclass
class GenerationOutcome:
    section: SectionSnapshot
    seed: int
    entries: list[TimetableEntry]
    coverage: list[CoverageItem]
    runtime_ms: int

    @property
    def target_sessions(self) -> int:
        return sum(item.target_sessions for item in self.coverage)

    @property
    def scheduled_sessions(self) -> int:
        return sum(item.scheduled_sessions for item in self.coverage)

    @property
    def is_complete(self) -> bool:
        return all(not item.is_short for item in self.coverage)


@contextmanager
def institution_generation_lock(db: Session, *, timeout_seconds: float) -> Iterator[None]:
    """Serialize generation runs across the whole institution.

    The in-process lock covers threads of this worker. On PostgreSQL a transaction-scoped
    advisory lock is taken as well, so separate workers sharing the database are serialized
    until the run's transaction commits or rolls back.
    """
    if not _generation_lock.acquire(timeout=timeout_seconds):
        logger.warning("Generation lock busy | timeout_seconds=%s", timeout_seconds)
        raise GenerationInProgressError(timeout_seconds)
    try:
        bind = db.get_bind()
        if bind.dialect.name == "postgresql":
            db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": GENERATION_ADVISORY_LOCK_KEY})
        yield
    finally:
        _generation_lock.release()


def resolve_seed(requested: int | None, settings: Settings) -> int:
    if requested is not None:
        return requested
    if settings.default_random_seed is not None:
        return settings.default_random_seed
    return random.SystemRandom().randrange(2**31)


def build_weekly_grid(settings: Settings) -> WeeklyGrid:
    try:
        return WeeklyGrid.from_settings(settings)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid time grid configuration: {exc}") from exc


def generate_section_timetable(
    db: Session,
    *,
    section_id: str,
    random_seed: int | None = None,
    settings: Settings | None = None,
) -> GenerationOutcome:
    """Regenerate one section's weekly timetable and replace its stored entries.

    Inputs are read in full before anything is deleted, so an ``InputLoadError`` leaves the
    previous schedule in place. A ``WriteError`` means the section may now have no entries.
    """
    settings = settings or get_settings()
    weekly_grid = build_weekly_grid(settings)
    seed = resolve_seed(random_seed, settings)
    started = perf_counter()
    logger.info("SECTION GENERATION START | section_id=%s | seed=%s", section_id, seed)

    with institution_generation_lock(db, timeout_seconds=settings.generation_lock_timeout_seconds):
        try:
            inputs = load_generation_inputs(db, section_id)
            availability = AvailabilityGrid.seeded(weekly_grid, inputs.existing_bookings)
            result = TimetableScheduler(
                inputs=inputs,
                weekly_grid=weekly_grid,
                availability=availability,
                rng=random.Random(seed),
            ).run()

            log_activity(
                db,
                action="timetable.generate",
                entity_type="section",
                entity_id=section_id,
                details={
                    "seed": seed,
                    "entries": len(result.entries),
                    "target_sessions": sum(item.target_sessions for item in result.coverage),
                    "scheduled_sessions": sum(item.scheduled_sessions for item in result.coverage),
                    "under_covered": [
                        f"{item.subject_code}:{item.session_type.value}" for item in result.under_coverage
                    ],
                },
            )
            entries = replace_section_entries(
                db,
                section_id=section_id,
                sessions=result.entries,
                weekly_grid=weekly_grid,
            )
        except Exception:
            db.rollback()
            logger.exception(
                "SECTION GENERATION FAILED | section_id=%s | seed=%s | wall_ms=%s",
                section_id,
                seed,
                int((perf_counter() - started) * 1000),
            )
            raise

    runtime_ms = int((perf_counter() - started) * 1000)
    outcome = GenerationOutcome(
        section=inputs.section,
        seed=seed,
        entries=entries,
        coverage=result.coverage,
        runtime_ms=runtime_ms,
    )
    logger.info(
        "SECTION GENERATION COMPLETE | section_id=%s | seed=%s | entries=%s | scheduled=%s | target=%s | runtime_ms=%s",
        section_id,
        seed,
        len(entries),
        outcome.scheduled_sessions,
        outcome.target_sessions,
        runtime_ms,
    )
    return outcome
