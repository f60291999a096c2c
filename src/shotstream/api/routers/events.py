"""
API routes for event ingestion and result reads.

Endpoints
---------
- `POST /events`: Publish an ordered batch of producer events.
- `GET /results`: Snapshot of every shot record (including an open shot).
- `POST /results/reset`: Start a fresh run.
- `GET /refresh`: Coalesced refresh bookkeeping.

Design Decisions
----------------
- **Same loop**: handlers are ``async def`` so publishing, aggregation and the
  refresh timer all run on the server's event loop thread.
- **Snapshots**: responses are built from deep copies, never live state.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from shotstream.api.schemas import EventBatch, PublishReceipt, RefreshStatus, ResultsPayload
from shotstream.api.session import ShotSession

router = APIRouter(tags=["Events"])


def get_session(request: Request) -> ShotSession:
    """Dependency: the session owned by the running application."""
    session: ShotSession = request.app.state.session
    return session


SessionDep = Annotated[ShotSession, Depends(get_session)]


@router.post(
    "/events",
    response_model=PublishReceipt,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Publish a batch of execution events",
)
async def publish_events(batch: EventBatch, session: SessionDep) -> PublishReceipt:
    """
    Publish ``batch.events`` in order.

    Observer failures do not reject the batch; they are counted in
    ``handler_failures``.
    """
    return session.publish_all(list(batch.events))


@router.get("/results", response_model=ResultsPayload, summary="Get shot results")
async def get_results(session: SessionDep) -> ResultsPayload:
    return session.results()


@router.post("/results/reset", response_model=ResultsPayload, summary="Clear all results")
async def reset_results(session: SessionDep) -> ResultsPayload:
    """Drop every record. A refresh that is already pending still fires."""
    return session.reset()


@router.get("/refresh", response_model=RefreshStatus, summary="Refresh signal status")
async def get_refresh_status(session: SessionDep) -> RefreshStatus:
    return session.refresh_status()


__all__ = ["get_session", "router"]
