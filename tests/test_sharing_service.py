"""
Tests for permission grants, public links and signed access to file bytes.
"""

import pytest

from filevault.configs.settings import settings
from filevault.consts.node_type import NodeType, PermissionLevel
from filevault.core.exceptions import AppError
from filevault.schemas.node import NodeCreate
from filevault.schemas.permission import ShareEntry
from filevault.services.sharing_service import SharingService

from conftest import OTHER, OWNER


async def stored_file(node_crud, object_store, name="photo.jpg", content=b"jpeg-bytes", owner=OWNER):
    key = f"{owner}/1700000000000_{name}"
    object_store.objects[key] = content
    return await node_crud.create(NodeCreate(
        owner_id=owner,
        node_type=NodeType.FILE,
        name=name,
        size_bytes=len(content),
        mime_type="image/jpeg",
        storage_path=key,
    ))


class TestGrants:
    """Tests for sharing a node with other accounts."""

    @pytest.mark.asyncio
    async def test_grant_creates_one_row_per_entry(self, sharing_service, node_service, permission_crud):
        folder = await node_service.create_folder(OWNER, "Shared")

        grants = await sharing_service.grant(OWNER, folder.id, [
            ShareEntry(user_id="alice", permission=PermissionLevel.READ),
            ShareEntry(user_id="bob", permission=PermissionLevel.WRITE),
        ])

        assert [g.shared_with for g in grants] == ["alice", "bob"]
        assert grants[1].level == PermissionLevel.WRITE
        assert all(g.owner_id == OWNER and g.node_id == folder.id for g in grants)
        assert len(permission_crud.rows) == 2

    @pytest.mark.asyncio
    async def test_grant_requires_users(self, sharing_service, node_service):
        folder = await node_service.create_folder(OWNER, "Shared")

        with pytest.raises(AppError) as exc:
            await sharing_service.grant(OWNER, folder.id, [])

        assert exc.value.code == "VALIDATION_ERROR"
        assert exc.value.field == "users"

    @pytest.mark.asyncio
    async def test_only_owner_can_share(self, sharing_service, node_service, permission_crud):
        folder = await node_service.create_folder(OWNER, "Shared")

        with pytest.raises(AppError) as exc:
            await sharing_service.grant(OTHER, folder.id, [ShareEntry(user_id=OTHER)])

        assert exc.value.code == "ACCESS_DENIED"
        assert permission_crud.rows == {}

    @pytest.mark.asyncio
    async def test_grant_does_not_widen_access(self, sharing_service, node_service):
        folder = await node_service.create_folder(OWNER, "Shared")
        await sharing_service.grant(OWNER, folder.id, [ShareEntry(user_id=OTHER, permission=PermissionLevel.WRITE)])

        with pytest.raises(AppError) as exc:
            await node_service.rename(OTHER, folder.id, "Hijacked")

        assert exc.value.code == "ACCESS_DENIED"

    @pytest.mark.asyncio
    async def test_typed_grant_rejects_wrong_type(self, sharing_service, node_service):
        folder = await node_service.create_folder(OWNER, "Shared")

        with pytest.raises(AppError) as exc:
            await sharing_service.grant(OWNER, folder.id, [ShareEntry(user_id="alice")], NodeType.FILE)

        assert exc.value.code == "INVALID_NODE_TYPE"

    @pytest.mark.asyncio
    async def test_update_and_revoke(self, sharing_service, node_service, permission_crud):
        folder = await node_service.create_folder(OWNER, "Shared")
        [grant] = await sharing_service.grant(OWNER, folder.id, [ShareEntry(user_id="alice")])

        updated = await sharing_service.update_grant(OWNER, folder.id, grant.id, PermissionLevel.COMMENT)
        assert updated.level == PermissionLevel.COMMENT

        await sharing_service.revoke_grant(OWNER, folder.id, grant.id)
        assert await sharing_service.list_grants(OWNER, folder.id) == []

    @pytest.mark.asyncio
    async def test_grant_from_another_node_not_found(self, sharing_service, node_service):
        a = await node_service.create_folder(OWNER, "A")
        b = await node_service.create_folder(OWNER, "B")
        [grant] = await sharing_service.grant(OWNER, a.id, [ShareEntry(user_id="alice")])

        with pytest.raises(AppError) as exc:
            await sharing_service.revoke_grant(OWNER, b.id, grant.id)

        assert exc.value.code == "PERMISSION_NOT_FOUND"
        assert exc.value.status_code == 404


class TestPublicLinks:
    """Tests for link creation and anonymous resolution."""

    @pytest.mark.asyncio
    async def test_link_is_stable(self, sharing_service, node_crud, object_store, link_crud):
        file = await stored_file(node_crud, object_store)

        first, first_new = await sharing_service.create_public_link(OWNER, file.id)
        second, second_new = await sharing_service.create_public_link(OWNER, file.id)

        assert first_new is True
        assert second_new is False
        assert first.token == second.token
        assert len(first.token) == 32
        assert len(link_crud.rows) == 1

    def test_public_url(self, monkeypatch):
        monkeypatch.setattr(settings, "PUBLIC_BASE_URL", "https://files.example.com/")

        assert SharingService.public_url("abc") == "https://files.example.com/public/abc"

    @pytest.mark.asyncio
    async def test_resolve_file_signs_download(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)
        link, _ = await sharing_service.create_public_link(OWNER, file.id)

        node, url = await sharing_service.resolve_public_resource(link.token)

        assert node.id == file.id
        assert url.startswith(f"https://storage.test/bucket/{file.storage_path}")
        assert object_store.signed == [(file.storage_path, settings.PUBLIC_LINK_TTL)]

    @pytest.mark.asyncio
    async def test_resolve_folder_has_no_download(self, sharing_service, node_service, object_store):
        folder = await node_service.create_folder(OWNER, "Album")
        link, _ = await sharing_service.create_public_link(OWNER, folder.id, NodeType.FOLDER)

        node, url = await sharing_service.resolve_public_resource(link.token)

        assert node.id == folder.id
        assert url is None
        assert object_store.signed == []

    @pytest.mark.asyncio
    async def test_signing_failure_still_resolves(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)
        link, _ = await sharing_service.create_public_link(OWNER, file.id)
        object_store.fail_sign = True

        node, url = await sharing_service.resolve_public_resource(link.token)

        assert node.id == file.id
        assert url is None

    @pytest.mark.asyncio
    async def test_unknown_token(self, sharing_service):
        with pytest.raises(AppError) as exc:
            await sharing_service.resolve_public_resource("0" * 32)

        assert exc.value.code == "LINK_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_trashed_resource(self, sharing_service, node_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)
        link, _ = await sharing_service.create_public_link(OWNER, file.id)
        await node_service.soft_delete(OWNER, file.id)

        with pytest.raises(AppError) as exc:
            await sharing_service.resolve_public_resource(link.token)

        assert exc.value.code == "RESOURCE_NOT_FOUND"


class TestSignedDownloads:
    """Tests for owner-only access to stored bytes."""

    @pytest.mark.asyncio
    async def test_signed_url_uses_requested_ttl(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)

        url, ttl = await sharing_service.create_signed_download_url(OWNER, file.id, 120)

        assert ttl == 120
        assert "X-Amz-Expires=120" in url

    @pytest.mark.asyncio
    async def test_signed_url_default_ttl(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)

        _, ttl = await sharing_service.create_signed_download_url(OWNER, file.id)

        assert ttl == settings.SIGNED_URL_DEFAULT_TTL

    @pytest.mark.asyncio
    async def test_signing_failure(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)
        object_store.fail_sign = True

        with pytest.raises(AppError) as exc:
            await sharing_service.create_signed_download_url(OWNER, file.id)

        assert exc.value.code == "SIGNED_URL_FAILED"
        assert exc.value.status_code == 502

    @pytest.mark.asyncio
    async def test_signed_url_not_owner(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)

        with pytest.raises(AppError) as exc:
            await sharing_service.create_signed_download_url(OTHER, file.id)

        assert exc.value.code == "ACCESS_DENIED"

    @pytest.mark.asyncio
    async def test_download_streams_content(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store, content=b"0123456789")

        node, stream = await sharing_service.open_download(OWNER, file.id)
        chunks = [chunk async for chunk in stream]

        assert node.id == file.id
        assert b"".join(chunks) == b"0123456789"
        assert len(chunks) > 1

    @pytest.mark.asyncio
    async def test_download_missing_object(self, sharing_service, node_crud, object_store):
        file = await stored_file(node_crud, object_store)
        object_store.objects.clear()

        with pytest.raises(AppError) as exc:
            await sharing_service.open_download(OWNER, file.id)

        assert exc.value.code == "DOWNLOAD_FAILED"
        assert exc.value.status_code == 502
