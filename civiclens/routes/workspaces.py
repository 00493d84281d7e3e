"""
Workspace endpoints - image analysis, assistant chat, grounded search and
reverse geocoding for one client.

Every AI flow answers with a renderable result (success or fallback); the
only error responses are for bad input, unknown workspaces and a chat send
while another is pending.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import BaseModel

from civiclens.core.settings import settings
from civiclens.models.analysis import AnalysisResult
from civiclens.models.chat import ChatSendRequest, ChatSendResponse
from civiclens.models.geocode import GeocodeResult
from civiclens.models.search import SearchRequest, SearchResult
from civiclens.models.ticket import Ticket, TicketDraftRequest
from civiclens.services.assistant import ASSISTANT_GREETING, SessionBusyError
from civiclens.services.issue_classifier import detect_image_mime
from civiclens.services.workspace import (
    CivicWorkspace,
    WorkspaceRegistry,
    WorkspaceSnapshot,
    get_workspace_registry,
)

logger = logging.getLogger(__name__)


class WorkspaceCreated(BaseModel):
    workspace_id: str
    greeting: str = ASSISTANT_GREETING


class AnalysisResponse(BaseModel):
    analysis: Optional[AnalysisResult] = None
    superseded: bool = False


class SearchResponse(BaseModel):
    result: Optional[SearchResult] = None
    superseded: bool = False


class GeocodeResponse(BaseModel):
    result: Optional[GeocodeResult] = None
    superseded: bool = False


router = APIRouter(prefix="/workspaces", tags=["Workspaces"])


def _get_workspace(workspace_id: str, registry: WorkspaceRegistry) -> CivicWorkspace:
    workspace = registry.get(workspace_id)
    if workspace is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Workspace {workspace_id} not found")
    return workspace


@router.post("", status_code=status.HTTP_201_CREATED, response_model=WorkspaceCreated)
async def create_workspace(registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    workspace = registry.create()
    logger.info(f"📝 Workspace created: {workspace.workspace_id}")
    return WorkspaceCreated(workspace_id=workspace.workspace_id)


@router.get("/{workspace_id}", response_model=WorkspaceSnapshot, response_model_exclude_none=True)
async def get_workspace(workspace_id: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    return _get_workspace(workspace_id, registry).snapshot()


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workspace(workspace_id: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    if not registry.remove(workspace_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Workspace {workspace_id} not found")


@router.post("/{workspace_id}/analysis", response_model=AnalysisResponse)
async def analyze_image(
    workspace_id: str,
    image: UploadFile = File(..., description="JPEG or PNG photo of the issue"),
    location_hint: Optional[str] = Form(None, max_length=500),
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    """
    Classify an uploaded photo.

    superseded is true when a newer analysis for the same workspace was
    started before this one finished; the snapshot then holds the newer one.
    """
    workspace = _get_workspace(workspace_id, registry)

    data = await image.read(settings.MAX_IMAGE_BYTES + 1)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image upload is empty")
    if len(data) > settings.MAX_IMAGE_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Image is too large")

    mime_type = detect_image_mime(data)
    if mime_type is None:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only JPEG and PNG images are supported",
        )

    outcome = await workspace.analyze(data, mime_type, location_hint)
    return AnalysisResponse(analysis=outcome.value, superseded=not outcome.current)


@router.post("/{workspace_id}/chat", response_model=ChatSendResponse)
async def send_chat_message(
    workspace_id: str,
    body: ChatSendRequest,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    workspace = _get_workspace(workspace_id, registry)
    try:
        reply = await workspace.chat(body.message)
    except SessionBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ChatSendResponse(reply=reply, transcript=list(workspace.session.transcript))


@router.delete("/{workspace_id}/chat", status_code=status.HTTP_204_NO_CONTENT)
async def clear_chat(workspace_id: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    workspace = _get_workspace(workspace_id, registry)
    try:
        workspace.session.clear()
    except SessionBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/{workspace_id}/search", response_model=SearchResponse)
async def search_civic_info(
    workspace_id: str,
    body: SearchRequest,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    workspace = _get_workspace(workspace_id, registry)
    try:
        outcome = await workspace.search(body.query)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return SearchResponse(result=outcome.value, superseded=not outcome.current)


@router.get("/{workspace_id}/geocode", response_model=GeocodeResponse, response_model_exclude_none=True)
async def reverse_geocode(
    workspace_id: str,
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude"),
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    workspace = _get_workspace(workspace_id, registry)
    outcome = await workspace.locate(lat, lng)
    return GeocodeResponse(result=outcome.value, superseded=not outcome.current)


@router.post("/{workspace_id}/ticket", status_code=status.HTTP_201_CREATED, response_model=Ticket)
async def draft_ticket(
    workspace_id: str,
    body: TicketDraftRequest,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    """
    Seed a ticket from the workspace's latest analysis.
    The ticket is returned to the caller, not stored.
    """
    workspace = _get_workspace(workspace_id, registry)
    analysis = workspace.analysis_flow.latest
    if analysis is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No analysis available for this workspace")
    if not analysis.is_reportable:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Analysis found no reportable issue ({analysis.issue_type})",
        )
    ticket = Ticket.from_analysis(analysis, body.location, image_reference=body.image_reference)
    logger.info(f"✅ Ticket drafted: {ticket.id} ({ticket.issue_type}, {ticket.severity.value})")
    return ticket
