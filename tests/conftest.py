import os
import sys
import warnings
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("CHOREO_ENVIRONMENT", "test")
os.environ.setdefault("CHOREO_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("CHOREO_TOKEN_STORE_BACKEND", "memory")
os.environ.setdefault("CHOREO_LOG_JSON", "false")
os.environ.setdefault("CHOREO_EVENT_BUS_NAME", "")
os.environ.setdefault("CHOREO_TEMPORAL_HOST", "")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from choreo.core.config import get_settings

get_settings.cache_clear()

from choreo.core.database import engine  # noqa: E402
from choreo.api import dependencies  # noqa: E402
from choreo.events_engine.publisher import set_event_publisher  # noqa: E402
from choreo.events_engine.router import set_choreography_router  # noqa: E402
from choreo.main import create_app  # noqa: E402
from choreo.models import Base  # noqa: E402
from choreo.token_store import InMemoryTokenStore, set_token_store  # noqa: E402
from choreo.workflow_engine.registry import set_choreography_registry  # noqa: E402


class RecordingWorkflowEngine:
    """Workflow engine fake that records every call it receives."""

    def __init__(self, execution_id: Optional[str] = "exec-1") -> None:
        self.execution_id = execution_id
        self.started: List[Tuple[str, str, Any]] = []
        self.signals: List[Tuple[str, Any]] = []
        self.aborts: List[Tuple[str, str]] = []

    async def start(self, name: str, definition_id: str, input_payload: Any) -> Optional[str]:
        self.started.append((name, definition_id, input_payload))
        return self.execution_id

    async def signal(self, token: str, payload: Any) -> None:
        self.signals.append((token, payload))

    async def abort(self, execution_id: str, cause: str) -> None:
        self.aborts.append((execution_id, cause))

    @property
    def calls(self) -> int:
        return len(self.started) + len(self.signals) + len(self.aborts)


class StubPublisher:
    def __init__(self) -> None:
        self.envelopes = []

    def publish(self, envelope):
        self.envelopes.append(envelope)


@pytest.fixture(autouse=True)
def reset_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    set_choreography_registry(None)
    set_choreography_router(None)
    set_event_publisher(None)
    set_token_store(None)
    yield
    set_token_store(None)
    set_choreography_router(None)
    set_choreography_registry(None)
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def workflow_engine() -> RecordingWorkflowEngine:
    return RecordingWorkflowEngine()


@pytest.fixture()
def token_store() -> InMemoryTokenStore:
    store = InMemoryTokenStore()
    set_token_store(store)
    return store


@pytest.fixture()
def stub_publisher() -> StubPublisher:
    publisher = StubPublisher()
    set_event_publisher(publisher)
    yield publisher
    set_event_publisher(None)


@pytest.fixture()
def client(workflow_engine, token_store) -> TestClient:  # noqa: ANN001
    app = create_app()
    app.dependency_overrides[dependencies.get_engine] = lambda: workflow_engine
    app.dependency_overrides[dependencies.get_store] = lambda: token_store
    with TestClient(app) as test_client:
        yield test_client


warnings.filterwarnings("ignore", category=PendingDeprecationWarning, module="starlette.formparsers")
