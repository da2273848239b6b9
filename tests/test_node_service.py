"""
Tests for the folder/file hierarchy: creation, rename, move, copy, trash, listings.
"""

import pytest

from filevault.consts.node_type import NodeType
from filevault.core.exceptions import AppError
from filevault.schemas.node import NodeCreate

from conftest import OTHER, OWNER


async def make_file(node_crud, name, parent_id=None, owner=OWNER, storage_path=None):
    return await node_crud.create(NodeCreate(
        owner_id=owner,
        node_type=NodeType.FILE,
        name=name,
        parent_id=parent_id,
        size_bytes=11,
        mime_type="text/plain",
        storage_path=storage_path or f"{owner}/{name}",
    ))


class TestCreateFolder:
    """Tests for folder creation."""

    @pytest.mark.asyncio
    async def test_create_root_folder(self, node_service):
        folder = await node_service.create_folder(OWNER, "  Reports  ")

        assert folder.name == "Reports"
        assert folder.node_type == NodeType.FOLDER
        assert folder.parent_id is None
        assert folder.deleted_at is None

    @pytest.mark.asyncio
    async def test_create_nested_folder(self, node_service):
        parent = await node_service.create_folder(OWNER, "Parent")
        child = await node_service.create_folder(OWNER, "Child", parent.id)

        assert child.parent_id == parent.id

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, node_service, node_crud):
        with pytest.raises(AppError) as exc:
            await node_service.create_folder(OWNER, "   ")

        assert exc.value.code == "VALIDATION_ERROR"
        assert exc.value.status_code == 422
        assert node_crud.rows == {}

    @pytest.mark.asyncio
    async def test_missing_parent(self, node_service):
        with pytest.raises(AppError) as exc:
            await node_service.create_folder(OWNER, "Orphan", "ffffffffffffffffffffffff")

        assert exc.value.code == "FOLDER_NOT_FOUND"
        assert exc.value.status_code == 404

    @pytest.mark.asyncio
    async def test_parent_must_be_folder(self, node_service, node_crud):
        file = await make_file(node_crud, "notes.txt")

        with pytest.raises(AppError) as exc:
            await node_service.create_folder(OWNER, "Inside", file.id)

        assert exc.value.code == "INVALID_TARGET"

    @pytest.mark.asyncio
    async def test_parent_owned_by_someone_else(self, node_service):
        foreign = await node_service.create_folder(OTHER, "Theirs")

        with pytest.raises(AppError) as exc:
            await node_service.create_folder(OWNER, "Mine", foreign.id)

        assert exc.value.code == "ACCESS_DENIED"
        assert exc.value.status_code == 403

    @pytest.mark.asyncio
    async def test_trashed_parent_is_not_found(self, node_service):
        parent = await node_service.create_folder(OWNER, "Old")
        await node_service.soft_delete(OWNER, parent.id)

        with pytest.raises(AppError) as exc:
            await node_service.create_folder(OWNER, "New", parent.id)

        assert exc.value.code == "FOLDER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_database_failure_is_wrapped(self, node_service, node_crud):
        node_crud.fail_writes = True

        with pytest.raises(AppError) as exc:
            await node_service.create_folder(OWNER, "Reports")

        assert exc.value.code == "DB_INSERT_FAILED"
        assert exc.value.status_code == 500


class TestRename:
    """Tests for renaming nodes."""

    @pytest.mark.asyncio
    async def test_rename_updates_name_and_timestamp(self, node_service):
        folder = await node_service.create_folder(OWNER, "Draft")
        before = folder.updated_at

        renamed = await node_service.rename(OWNER, folder.id, " Final ", NodeType.FOLDER)

        assert renamed.name == "Final"
        assert renamed.updated_at > before

    @pytest.mark.asyncio
    async def test_rename_wrong_type(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")

        with pytest.raises(AppError) as exc:
            await node_service.rename(OWNER, file.id, "b", NodeType.FOLDER)

        assert exc.value.code == "INVALID_NODE_TYPE"

    @pytest.mark.asyncio
    async def test_rename_not_owner(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")

        with pytest.raises(AppError) as exc:
            await node_service.rename(OTHER, file.id, "b", NodeType.FILE)

        assert exc.value.code == "ACCESS_DENIED"
        assert file.name == "a.txt"

    @pytest.mark.asyncio
    async def test_rename_missing_file(self, node_service):
        with pytest.raises(AppError) as exc:
            await node_service.rename(OWNER, "not-an-id", "b", NodeType.FILE)

        assert exc.value.code == "FILE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_rename_to_blank(self, node_service):
        folder = await node_service.create_folder(OWNER, "Keep")

        with pytest.raises(AppError) as exc:
            await node_service.rename(OWNER, folder.id, "")

        assert exc.value.code == "VALIDATION_ERROR"
        assert folder.name == "Keep"


class TestMove:
    """Tests for moving files and folders."""

    @pytest.mark.asyncio
    async def test_move_file(self, node_service, node_crud):
        target = await node_service.create_folder(OWNER, "Target")
        file = await make_file(node_crud, "a.txt")

        moved = await node_service.move_file(OWNER, file.id, target.id)

        assert moved.parent_id == target.id

    @pytest.mark.asyncio
    async def test_move_file_requires_target(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")

        with pytest.raises(AppError) as exc:
            await node_service.move_file(OWNER, file.id, None)

        assert exc.value.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_move_file_into_file(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")
        other = await make_file(node_crud, "b.txt")

        with pytest.raises(AppError) as exc:
            await node_service.move_file(OWNER, file.id, other.id)

        assert exc.value.code == "INVALID_TARGET"
        assert file.parent_id is None

    @pytest.mark.asyncio
    async def test_move_file_into_foreign_folder(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")
        foreign = await node_service.create_folder(OTHER, "Theirs")

        with pytest.raises(AppError) as exc:
            await node_service.move_file(OWNER, file.id, foreign.id)

        assert exc.value.code == "ACCESS_DENIED"

    @pytest.mark.asyncio
    async def test_move_file_missing_target(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")

        with pytest.raises(AppError) as exc:
            await node_service.move_file(OWNER, file.id, "ffffffffffffffffffffffff")

        assert exc.value.code == "FOLDER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_move_folder(self, node_service):
        a = await node_service.create_folder(OWNER, "A")
        b = await node_service.create_folder(OWNER, "B")

        moved = await node_service.move_folder(OWNER, b.id, a.id)

        assert moved.parent_id == a.id

    @pytest.mark.asyncio
    async def test_move_folder_into_itself(self, node_service):
        a = await node_service.create_folder(OWNER, "A")

        with pytest.raises(AppError) as exc:
            await node_service.move_folder(OWNER, a.id, a.id)

        assert exc.value.code == "INVALID_MOVE"

    @pytest.mark.asyncio
    async def test_move_folder_into_descendant(self, node_service):
        a = await node_service.create_folder(OWNER, "A")
        b = await node_service.create_folder(OWNER, "B", a.id)
        c = await node_service.create_folder(OWNER, "C", b.id)

        with pytest.raises(AppError) as exc:
            await node_service.move_folder(OWNER, a.id, c.id)

        assert exc.value.code == "INVALID_MOVE"
        assert a.parent_id is None

    @pytest.mark.asyncio
    async def test_move_folder_missing_target(self, node_service):
        a = await node_service.create_folder(OWNER, "A")

        with pytest.raises(AppError) as exc:
            await node_service.move_folder(OWNER, a.id, "ffffffffffffffffffffffff")

        assert exc.value.code == "TARGET_FOLDER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_tree_stays_acyclic_after_moves(self, node_service, node_crud):
        a = await node_service.create_folder(OWNER, "A")
        b = await node_service.create_folder(OWNER, "B")
        c = await node_service.create_folder(OWNER, "C")

        await node_service.move_folder(OWNER, b.id, a.id)
        await node_service.move_folder(OWNER, c.id, b.id)
        with pytest.raises(AppError):
            await node_service.move_folder(OWNER, a.id, c.id)
        with pytest.raises(AppError):
            await node_service.move_folder(OWNER, b.id, c.id)

        for node in node_crud.rows.values():
            seen = set()
            current = node
            while current.parent_id:
                assert current.id not in seen
                seen.add(current.id)
                current = node_crud.rows[current.parent_id]


class TestCopy:
    """Tests for copying files."""

    @pytest.mark.asyncio
    async def test_copy_shares_storage_not_identity(self, node_service, node_crud):
        folder = await node_service.create_folder(OWNER, "Docs")
        file = await make_file(node_crud, "report.pdf", parent_id=folder.id)

        copy = await node_service.copy_file(OWNER, file.id)

        assert copy.id != file.id
        assert copy.name == "report.pdf_copy"
        assert copy.storage_path == file.storage_path
        assert copy.size_bytes == file.size_bytes
        assert copy.parent_id == folder.id

    @pytest.mark.asyncio
    async def test_copy_into_other_folder(self, node_service, node_crud):
        target = await node_service.create_folder(OWNER, "Elsewhere")
        file = await make_file(node_crud, "a.txt")

        copy = await node_service.copy_file(OWNER, file.id, target.id)

        assert copy.parent_id == target.id

    @pytest.mark.asyncio
    async def test_copy_folder_rejected(self, node_service):
        folder = await node_service.create_folder(OWNER, "Docs")

        with pytest.raises(AppError) as exc:
            await node_service.copy_file(OWNER, folder.id)

        assert exc.value.code == "INVALID_NODE_TYPE"


class TestSoftDelete:
    """Tests for moving nodes to the trash."""

    @pytest.mark.asyncio
    async def test_folder_delete_cascades_to_whole_subtree(self, node_service, node_crud):
        root = await node_service.create_folder(OWNER, "Root")
        sub = await node_service.create_folder(OWNER, "Sub", root.id)
        deep = await make_file(node_crud, "deep.txt", parent_id=sub.id)
        shallow = await make_file(node_crud, "shallow.txt", parent_id=root.id)
        outside = await make_file(node_crud, "outside.txt")

        result = await node_service.soft_delete(OWNER, root.id, NodeType.FOLDER)

        assert result["affected"] == 4
        for node in (root, sub, deep, shallow):
            assert node.deleted_at == result["deleted_at"]
        assert outside.deleted_at is None

    @pytest.mark.asyncio
    async def test_earlier_deletions_keep_their_timestamp(self, node_service, node_crud):
        root = await node_service.create_folder(OWNER, "Root")
        early = await make_file(node_crud, "early.txt", parent_id=root.id)
        first = await node_service.soft_delete(OWNER, early.id)

        second = await node_service.soft_delete(OWNER, root.id)

        assert early.deleted_at == first["deleted_at"]
        assert root.deleted_at == second["deleted_at"]
        assert second["affected"] == 1

    @pytest.mark.asyncio
    async def test_child_added_after_delete_stays_active(self, node_service, node_crud):
        folder = await node_service.create_folder(OWNER, "Archive")
        await node_service.soft_delete(OWNER, folder.id, NodeType.FOLDER)

        late = await make_file(node_crud, "late.txt", parent_id=folder.id)

        assert late.deleted_at is None
        assert late.is_deleted is False
        assert (await node_crud.get_by_id(late.id)).deleted_at is None

    @pytest.mark.asyncio
    async def test_delete_twice(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")
        await node_service.soft_delete(OWNER, file.id, NodeType.FILE)

        with pytest.raises(AppError) as exc:
            await node_service.soft_delete(OWNER, file.id, NodeType.FILE)

        assert exc.value.code == "ALREADY_DELETED"

    @pytest.mark.asyncio
    async def test_delete_not_owner(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")

        with pytest.raises(AppError) as exc:
            await node_service.soft_delete(OTHER, file.id)

        assert exc.value.code == "ACCESS_DENIED"
        assert file.deleted_at is None

    @pytest.mark.asyncio
    async def test_trashed_nodes_hidden_from_listing(self, node_service, node_crud):
        keep = await make_file(node_crud, "keep.txt")
        gone = await make_file(node_crud, "gone.txt")
        await node_service.soft_delete(OWNER, gone.id)

        items, total = await node_service.list_children(OWNER, None)
        trash, trash_total = await node_service.list_trash(OWNER)

        assert [n.id for n in items] == [keep.id]
        assert total == 1
        assert [n.id for n in trash] == [gone.id]
        assert trash_total == 1


class TestListChildren:
    """Tests for folder content listings."""

    @pytest.mark.asyncio
    async def test_folders_first_then_by_name(self, node_service, node_crud):
        await make_file(node_crud, "b.txt")
        await node_service.create_folder(OWNER, "Zeta")
        await make_file(node_crud, "a.txt")
        await node_service.create_folder(OWNER, "Alpha")

        items, _ = await node_service.list_children(OWNER, None, page=1, limit=10)

        assert [n.name for n in items] == ["Alpha", "Zeta", "a.txt", "b.txt"]

    @pytest.mark.asyncio
    async def test_pagination_windows(self, node_service, node_crud):
        for i in range(25):
            await make_file(node_crud, f"file-{i:02d}.txt")

        page3, total = await node_service.list_children(OWNER, None, page=3, limit=10)
        page4, _ = await node_service.list_children(OWNER, None, page=4, limit=10)

        assert total == 25
        assert [n.name for n in page3] == [f"file-{i:02d}.txt" for i in range(20, 25)]
        assert page4 == []

    @pytest.mark.asyncio
    async def test_listing_a_file_is_rejected(self, node_service, node_crud):
        file = await make_file(node_crud, "a.txt")

        with pytest.raises(AppError) as exc:
            await node_service.list_children(OWNER, file.id)

        assert exc.value.code == "INVALID_NODE_TYPE"

    @pytest.mark.asyncio
    async def test_duplicate_sibling_names_allowed(self, node_service):
        await node_service.create_folder(OWNER, "Same")
        await node_service.create_folder(OWNER, "Same")

        items, total = await node_service.list_children(OWNER, None)

        assert total == 2
        assert {n.name for n in items} == {"Same"}

    @pytest.mark.asyncio
    async def test_list_nodes_by_type(self, node_service, node_crud):
        await node_service.create_folder(OWNER, "F")
        await make_file(node_crud, "x.txt")
        await make_file(node_crud, "y.txt", owner=OTHER)

        files, total = await node_service.list_nodes(OWNER, NodeType.FILE)

        assert total == 1
        assert [f.name for f in files] == ["x.txt"]
