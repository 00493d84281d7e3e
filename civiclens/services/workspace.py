"""
Civic Workspace - server-side mirror of one client's UI state.

A workspace bundles the three independent request flows (analysis, search,
geocoding) and one assistant session. Components are built around a shared
model client that is passed in explicitly.
"""

import logging
import uuid
from collections import OrderedDict
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from civiclens.core.settings import settings
from civiclens.models.analysis import AnalysisResult
from civiclens.models.chat import ChatMessage
from civiclens.models.geocode import GeocodeResult
from civiclens.models.search import SearchResult
from civiclens.services.assistant import ASSISTANT_GREETING, AssistantSession
from civiclens.services.flow_state import FlowOutcome, FlowState
from civiclens.services.gemini import ModelClient, get_model_client
from civiclens.services.geocoding import GeocodingProvider, MapsGroundingProvider
from civiclens.services.grounded_search import GroundedSearchService
from civiclens.services.issue_classifier import IssueClassifier

logger = logging.getLogger(__name__)


class WorkspaceSnapshot(BaseModel):
    workspace_id: str
    greeting: str = ASSISTANT_GREETING
    analysis: Optional[AnalysisResult] = None
    search: Optional[SearchResult] = None
    geocode: Optional[GeocodeResult] = None
    transcript: List[ChatMessage] = Field(default_factory=list)
    pending: Dict[str, bool] = Field(default_factory=dict)


class CivicWorkspace:
    """
    One client's analysis / search / geocode / chat state.

    Each flow has its own pending flag; only the chat session serializes
    its own sends.
    """

    def __init__(
        self,
        workspace_id: str,
        classifier: IssueClassifier,
        search_service: GroundedSearchService,
        geocoder: GeocodingProvider,
        session: AssistantSession,
    ):
        self.workspace_id = workspace_id
        self.classifier = classifier
        self.search_service = search_service
        self.geocoder = geocoder
        self.session = session
        self.analysis_flow: FlowState[AnalysisResult] = FlowState("analysis")
        self.search_flow: FlowState[SearchResult] = FlowState("search")
        self.geocode_flow: FlowState[GeocodeResult] = FlowState("geocode")

    @classmethod
    def create(cls, client: ModelClient, workspace_id: Optional[str] = None) -> "CivicWorkspace":
        return cls(
            workspace_id=workspace_id or uuid.uuid4().hex,
            classifier=IssueClassifier(client),
            search_service=GroundedSearchService(client),
            geocoder=MapsGroundingProvider(client),
            session=AssistantSession(client),
        )

    async def analyze(
        self,
        image_bytes: bytes,
        mime_type: str = "image/jpeg",
        location_hint: Optional[str] = None,
    ) -> FlowOutcome[AnalysisResult]:
        return await self.analysis_flow.run(
            lambda: self.classifier.classify(image_bytes, mime_type, location_hint)
        )

    async def search(self, query: str) -> FlowOutcome[SearchResult]:
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")
        return await self.search_flow.run(lambda: self.search_service.search(query))

    async def locate(self, latitude: float, longitude: float) -> FlowOutcome[GeocodeResult]:
        return await self.geocode_flow.run(lambda: self.geocoder.reverse_geocode(latitude, longitude))

    async def chat(self, message: str) -> ChatMessage:
        return await self.session.send(message)

    def snapshot(self) -> WorkspaceSnapshot:
        return WorkspaceSnapshot(
            workspace_id=self.workspace_id,
            analysis=self.analysis_flow.latest,
            search=self.search_flow.latest,
            geocode=self.geocode_flow.latest,
            transcript=list(self.session.transcript),
            pending={
                "analysis": self.analysis_flow.pending,
                "search": self.search_flow.pending,
                "geocode": self.geocode_flow.pending,
                "chat": self.session.is_busy,
            },
        )


class WorkspaceRegistry:
    """
    In-memory workspace store.

    Bounded: once max_workspaces is reached the least recently used
    workspace is evicted.
    """

    def __init__(self, client: ModelClient, max_workspaces: Optional[int] = None):
        self.client = client
        self.max_workspaces = max_workspaces or settings.MAX_WORKSPACES
        self._workspaces: "OrderedDict[str, CivicWorkspace]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._workspaces)

    def create(self) -> CivicWorkspace:
        workspace = CivicWorkspace.create(self.client)
        self._workspaces[workspace.workspace_id] = workspace
        while len(self._workspaces) > self.max_workspaces:
            evicted_id, _ = self._workspaces.popitem(last=False)
            logger.info(f"Evicted workspace {evicted_id} (limit {self.max_workspaces})")
        return workspace

    def get(self, workspace_id: str) -> Optional[CivicWorkspace]:
        workspace = self._workspaces.get(workspace_id)
        if workspace is not None:
            self._workspaces.move_to_end(workspace_id)
        return workspace

    def remove(self, workspace_id: str) -> bool:
        return self._workspaces.pop(workspace_id, None) is not None


# Global registry instance (singleton)
_registry: Optional[WorkspaceRegistry] = None


def get_workspace_registry() -> WorkspaceRegistry:
    global _registry
    if _registry is None:
        _registry = WorkspaceRegistry(get_model_client())
    return _registry
