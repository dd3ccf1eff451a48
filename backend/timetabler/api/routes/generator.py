import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.schemas.generator import (
    CoverageItemOut,
    CoverageReport,
    GenerateTimetableRequest,
    GenerateTimetableResponse,
)
from timetabler.services.generation import generate_section_timetable
from timetabler.services.timetable_view import build_entry_views

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/timetable/sections/{section_id}/generate", response_model=GenerateTimetableResponse)
def generate_timetable(
    section_id: str,
    payload: GenerateTimetableRequest | None = None,
    db: Session = Depends(get_db),
) -> GenerateTimetableResponse:
    random_seed = payload.random_seed if payload is not None else None
    outcome = generate_section_timetable(db, section_id=section_id, random_seed=random_seed)
    if not outcome.is_complete:
        logger.warning(
            "TIMETABLE GENERATED WITH SHORTFALL | section_id=%s | scheduled=%s | target=%s",
            section_id,
            outcome.scheduled_sessions,
            outcome.target_sessions,
        )
    return GenerateTimetableResponse(
        section_id=outcome.section.id,
        section_name=outcome.section.name,
        seed=outcome.seed,
        runtime_ms=outcome.runtime_ms,
        entries=build_entry_views(db, outcome.entries),
        coverage=CoverageReport(
            items=[CoverageItemOut.model_validate(item) for item in outcome.coverage],
            target_sessions=outcome.target_sessions,
            scheduled_sessions=outcome.scheduled_sessions,
            is_complete=outcome.is_complete,
        ),
    )
