import logging

from fastapi import APIRouter, Depends

from recap.agg.koms import KomsOverTime, koms_by_month
from recap.app.dependencies import session_for_year
from recap.app.models import EnrichmentCommandResponse
from recap.models import EnrichmentSnapshot
from recap.session import ActivitySession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/koms", tags=["koms"])


@router.get("/{year}", response_model=EnrichmentSnapshot)
async def read_kom_progress(
    year: int, session: ActivitySession = Depends(session_for_year)
) -> EnrichmentSnapshot:
    """Get the enrichment status, progress, pause reason and KOM counts so far."""
    return session.orchestrator.snapshot()


@router.get("/{year}/by-month", response_model=KomsOverTime)
async def read_koms_by_month(
    year: int, session: ActivitySession = Depends(session_for_year)
) -> KomsOverTime:
    """Get KOM totals per month and sport type for the filtered activities."""
    return koms_by_month(session.dataset, session.orchestrator.achievements)


@router.post("/{year}/resume", response_model=EnrichmentCommandResponse)
async def resume_kom_fetch(
    year: int, session: ActivitySession = Depends(session_for_year)
) -> EnrichmentCommandResponse:
    """Resume a run paused by a Strava rate limit. A no-op in any other state."""
    task = session.orchestrator.resume()
    if task is not None:
        logger.info(f"Resumed KOM enrichment for {year}")
    return EnrichmentCommandResponse(
        started=task is not None, snapshot=session.orchestrator.snapshot()
    )


@router.post("/{year}/refresh", response_model=EnrichmentCommandResponse)
async def refresh_kom_data(
    year: int, session: ActivitySession = Depends(session_for_year)
) -> EnrichmentCommandResponse:
    """Re-run enrichment over the current activities. Cached counts are not re-fetched."""
    task = session.orchestrator.refresh()
    if task is not None:
        logger.info(f"Refreshing KOM enrichment for {year}")
    return EnrichmentCommandResponse(
        started=task is not None, snapshot=session.orchestrator.snapshot()
    )
