import time
import uuid
from typing import Optional, Sequence, Tuple

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from filevault.consts.error_codes import ErrorCode
from filevault.consts.node_type import NodeType
from filevault.core.exceptions import AppError
from filevault.crud.upload_session import UploadSessionCRUD, UploadSessionCreate, upload_session_crud
from filevault.models.node import Node
from filevault.models.upload_session import TargetMetadata, UploadSession
from filevault.schemas.node import NodeCreate
from filevault.schemas.upload import CompletedPart
from filevault.services.node_service import NodeService, require_name
from filevault.services.object_store import ObjectStore
from filevault.utils import get_logger

logger = get_logger(__name__)


def _missing(field: str) -> AppError:
    return AppError(
        f"{field} is required",
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        code=ErrorCode.VALIDATION_ERROR,
        field=field,
    )


def _normalize_etag(etag: str) -> str:
    return (etag or "").strip().strip('"')


class UploadService:
    """Single-shot uploads and multipart assembly.

    A multipart upload moves through INITIATED -> PARTS_UPLOADING -> COMPLETED.
    Acknowledged parts are kept on an UploadSession so finalize can check that
    the caller's part list matches what the store accepted.
    """

    def __init__(
        self,
        nodes: Optional[NodeService] = None,
        session_crud: Optional[UploadSessionCRUD] = None,
        object_store: Optional[ObjectStore] = None,
    ):
        self.nodes = nodes or NodeService()
        self.session_crud = session_crud or upload_session_crud
        self._object_store = object_store

    @property
    def object_store(self) -> ObjectStore:
        if self._object_store is None:
            self._object_store = ObjectStore()
        return self._object_store

    @staticmethod
    def _check_session_owner(session: Optional[UploadSession], user_id: Optional[str]) -> None:
        if session and session.owner_id and user_id and session.owner_id != user_id:
            raise AppError("Access denied to upload", status_code=HTTP_403_FORBIDDEN, code=ErrorCode.ACCESS_DENIED)

    async def initiate_upload(
        self,
        user_id: str,
        name: str,
        size_bytes: Optional[int] = None,
        mime_type: Optional[str] = None,
    ) -> dict:
        """Open a multipart upload under a fresh key

        Args:
            user_id: Uploading account
            name: Final file name
            size_bytes: Expected total size, stored on the node at finalize
            mime_type: File MIME type
        """
        file_name = require_name(name, "name")
        key = f"{user_id}/{uuid.uuid4().hex}_{file_name}"

        try:
            upload_id = await self.object_store.create_multipart_upload(key, mime_type)
        except Exception as e:
            logger.error(f"[UPLOAD_INIT] Store rejected upload - key: {key}, error: {str(e)}")
            raise AppError(
                f"Failed to start upload: {str(e)}",
                status_code=HTTP_502_BAD_GATEWAY,
                code=ErrorCode.UPLOAD_FAILED,
            )

        try:
            await self.session_crud.create(UploadSessionCreate(
                upload_id=upload_id,
                storage_key=key,
                owner_id=user_id,
                target_metadata=TargetMetadata(name=file_name, size_bytes=size_bytes, mime_type=mime_type),
            ))
        except Exception as e:
            logger.error(f"[UPLOAD_INIT] Failed to persist session {upload_id}: {str(e)}")
            raise AppError(
                f"Failed to start upload: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_INSERT_FAILED,
            )

        logger.info(f"[UPLOAD_INIT] {upload_id} opened for {user_id} - key: {key}")
        return {"upload_id": upload_id, "key": key}

    async def put_chunk(
        self,
        upload_id: Optional[str],
        part_number: Optional[int],
        key: Optional[str],
        data: Optional[bytes],
        user_id: Optional[str] = None,
    ) -> dict:
        """Upload one part and record its acknowledgment, returns {etag, part_number}"""
        if not upload_id:
            raise _missing("uploadId")
        if not part_number:
            raise _missing("partNumber")
        if not key:
            raise _missing("key")
        if part_number < 1:
            raise AppError(
                "partNumber must be at least 1",
                status_code=HTTP_422_UNPROCESSABLE_ENTITY,
                code=ErrorCode.VALIDATION_ERROR,
                field="partNumber",
            )
        if data is None:
            raise AppError("Chunk is missing", status_code=HTTP_400_BAD_REQUEST, code=ErrorCode.CHUNK_MISSING)

        session = await self.session_crud.get_by_upload_id(upload_id)
        self._check_session_owner(session, user_id)
        if session and session.storage_key != key:
            raise AppError(
                "Key does not match the upload",
                status_code=HTTP_422_UNPROCESSABLE_ENTITY,
                code=ErrorCode.VALIDATION_ERROR,
                field="key",
            )

        try:
            result = await self.object_store.upload_part(upload_id, key, part_number, data)
        except Exception as e:
            logger.error(f"[UPLOAD_CHUNK] Part {part_number} of {upload_id} failed: {str(e)}")
            raise AppError(
                f"Chunk upload failed: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.CHUNK_UPLOAD_FAILED,
            )

        try:
            if session is None:
                session = await self.session_crud.create(UploadSessionCreate(
                    upload_id=upload_id,
                    storage_key=key,
                    owner_id=user_id,
                ))
            await self.session_crud.record_part(session, part_number, result["etag"])
        except Exception as e:
            logger.error(f"[UPLOAD_CHUNK] Could not record part {part_number} of {upload_id}: {str(e)}")
            raise AppError(
                f"Failed to record chunk: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_UPDATE_FAILED,
            )

        logger.debug(f"[UPLOAD_CHUNK] {upload_id} part {part_number} stored ({len(data)} bytes)")
        return {"etag": result["etag"], "part_number": part_number}

    @staticmethod
    def _verify_parts(session: Optional[UploadSession], parts: Sequence[CompletedPart]) -> None:
        if not session or not session.parts:
            return
        acknowledged = {(p.part_number, _normalize_etag(p.etag)) for p in session.parts}
        unknown = [p.part_number for p in parts if (p.part_number, _normalize_etag(p.etag)) not in acknowledged]
        if unknown:
            raise AppError(
                f"Parts were never acknowledged for this upload: {unknown}",
                status_code=HTTP_400_BAD_REQUEST,
                code=ErrorCode.UPLOAD_PARTS_MISMATCH,
            )

    async def complete_upload(
        self,
        user_id: str,
        upload_id: Optional[str],
        key: Optional[str],
        parts: Optional[Sequence[CompletedPart]],
        name: Optional[str] = None,
        size_bytes: Optional[int] = None,
        mime_type: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> Tuple[Node, Optional[str]]:
        """Assemble the parts into one object and register it as a file node.

        Parts are forwarded in the caller's order. Returns the new node and the
        store's location for the object.
        """
        if not upload_id:
            raise _missing("uploadId")
        if not key:
            raise _missing("key")
        if not parts:
            raise _missing("parts")

        session = await self.session_crud.get_by_upload_id(upload_id)
        self._check_session_owner(session, user_id)
        if session and session.storage_key != key:
            raise AppError(
                "Key does not match the upload",
                status_code=HTTP_422_UNPROCESSABLE_ENTITY,
                code=ErrorCode.VALIDATION_ERROR,
                field="key",
            )
        self._verify_parts(session, parts)
        if parent_id:
            await self.nodes.get_node(user_id, parent_id, NodeType.FOLDER)

        meta = session.target_metadata if session else TargetMetadata()
        file_name = (name or meta.name or key.rsplit("/", 1)[-1]).strip()

        try:
            logger.info(f"[UPLOAD_COMPLETE] Completing {upload_id} with {len(parts)} parts - key: {key}")
            result = await self.object_store.complete_multipart(
                upload_id, key, [(p.part_number, p.etag) for p in parts]
            )
            node = await self.nodes.crud.create(NodeCreate(
                owner_id=user_id,
                node_type=NodeType.FILE,
                name=file_name,
                parent_id=parent_id,
                size_bytes=size_bytes if size_bytes is not None else meta.size_bytes,
                mime_type=mime_type or meta.mime_type,
                storage_path=key,
            ))
        except Exception as e:
            logger.error(f"[UPLOAD_COMPLETE] Failed - upload_id: {upload_id}, error: {str(e)}", exc_info=True)
            raise AppError(
                str(e) or "Upload completion failed",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.UPLOAD_COMPLETE_FAILED,
            )

        if session:
            try:
                await self.session_crud.delete(session)
            except Exception as e:
                logger.warning(f"[UPLOAD_COMPLETE] Session {upload_id} not cleaned up: {str(e)}")

        logger.info(f"[UPLOAD_COMPLETE] {upload_id} registered as file {node.id}")
        return node, result.get("location")

    async def upload_file(
        self,
        user_id: str,
        data: Optional[bytes],
        name: Optional[str],
        size_bytes: Optional[int] = None,
        mime_type: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> Node:
        """Store a whole file in one request and record its metadata

        Args:
            user_id: Uploading account
            data: File content
            name: Original file name
            size_bytes: Size reported by the client, defaults to len(data)
            mime_type: File MIME type
            parent_id: Destination folder, None for the root
        """
        if data is None:
            raise AppError("File is missing", status_code=HTTP_400_BAD_REQUEST, code=ErrorCode.FILE_MISSING)
        file_name = require_name(name, "name")
        if parent_id:
            await self.nodes.get_node(user_id, parent_id, NodeType.FOLDER)

        key = f"{user_id}/{int(time.time() * 1000)}_{file_name}"
        try:
            await self.object_store.put(key, data, mime_type)
        except Exception as e:
            logger.error(f"[FILE_UPLOAD] Store put failed - key: {key}, error: {str(e)}")
            raise AppError(
                f"Upload failed: {str(e)}",
                status_code=HTTP_502_BAD_GATEWAY,
                code=ErrorCode.UPLOAD_FAILED,
            )

        try:
            node = await self.nodes.crud.create(NodeCreate(
                owner_id=user_id,
                node_type=NodeType.FILE,
                name=file_name,
                parent_id=parent_id,
                size_bytes=size_bytes if size_bytes is not None else len(data),
                mime_type=mime_type,
                storage_path=key,
            ))
        except Exception as e:
            # The stored object stays behind without metadata
            logger.error(f"[FILE_UPLOAD] Metadata insert failed, orphaned object {key}: {str(e)}")
            raise AppError(
                f"Failed to save file metadata: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_INSERT_FAILED,
            )

        logger.info(f"[FILE_UPLOAD] {file_name} stored as {node.id} ({len(data)} bytes)")
        return node
