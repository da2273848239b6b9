"""
Pytest configuration and fixtures for filevault tests.
"""

import sys
from pathlib import Path

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

# Add project root and this directory to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import (  # noqa: E402
    FakeNodeCRUD,
    FakeObjectStore,
    FakePermissionCRUD,
    FakePublicLinkCRUD,
    FakeStarCRUD,
    FakeUploadSessionCRUD,
)
from filevault.api import deps  # noqa: E402
from filevault.configs.setup import create_app  # noqa: E402
from filevault.services import NodeService, SearchService, SharingService, UploadService  # noqa: E402
from filevault.utils.verify_token import get_current_user_id  # noqa: E402

OWNER = "user-owner"
OTHER = "user-other"


@pytest.fixture
def node_crud():
    return FakeNodeCRUD()


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def permission_crud():
    return FakePermissionCRUD()


@pytest.fixture
def link_crud():
    return FakePublicLinkCRUD()


@pytest.fixture
def star_crud():
    return FakeStarCRUD()


@pytest.fixture
def session_crud():
    return FakeUploadSessionCRUD()


@pytest.fixture
def node_service(node_crud):
    return NodeService(crud=node_crud)


@pytest.fixture
def sharing_service(node_service, permission_crud, link_crud, object_store):
    return SharingService(
        nodes=node_service,
        crud=permission_crud,
        link_crud=link_crud,
        object_store=object_store,
    )


@pytest.fixture
def upload_service(node_service, session_crud, object_store):
    return UploadService(nodes=node_service, session_crud=session_crud, object_store=object_store)


@pytest.fixture
def search_service(node_service, star_crud):
    return SearchService(nodes=node_service, crud=star_crud)


@pytest.fixture
def app(node_service, sharing_service, upload_service, search_service):
    """Application wired to the in-memory fakes; X-Test-User selects the requester"""
    application = create_app(use_lifespan=False)

    async def _current_user(request: Request) -> str:
        return request.headers.get("X-Test-User", OWNER)

    application.dependency_overrides[get_current_user_id] = _current_user
    application.dependency_overrides[deps.get_node_service] = lambda: node_service
    application.dependency_overrides[deps.get_sharing_service] = lambda: sharing_service
    application.dependency_overrides[deps.get_upload_service] = lambda: upload_service
    application.dependency_overrides[deps.get_search_service] = lambda: search_service
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
