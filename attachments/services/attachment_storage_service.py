import datetime
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import IO

from django.conf import settings
from django.core.files import File
from django.core.files.storage import Storage, storages

from attachments.constants import AttachmentUploadStatus
from attachments.exceptions import AttachmentStorageError
from attachments.models import StoredAttachmentModel
from attachments.services.dataclasses import (
    AttachmentReconciliationSummary,
    AttachmentStoreRequest,
    AttachmentStoreResult,
)


logger = logging.getLogger(__name__)


class AttachmentStorageService:
    """
    Writes attachment blobs to the `attachments` storage and keeps the attachment rows'
    `upload_status` in line with what was actually stored.
    """

    def __init__(self, storage: Storage | None = None, max_workers: int | None = None):
        self._storage = storage
        self.max_workers = max_workers or settings.ATTACHMENT_UPLOAD_MAX_WORKERS

    @property
    def storage(self) -> Storage:
        if self._storage is None:
            self._storage = storages["attachments"]
        return self._storage

    def store(self, key: str, media_type: str, stream: IO) -> AttachmentStoreResult:
        """
        Writes one blob under `key`, tagged with `media_type`. Makes a single attempt and never
        raises: failures are reported in the result.
        """
        content = File(stream, name=key)
        content.content_type = media_type
        try:
            saved_name = self.storage.save(key, content)
        except Exception as e:  # noqa: BLE001
            logger.exception("Failed to store attachment blob %s", key)
            return AttachmentStoreResult(key=key, stored=False, error=str(e))

        if saved_name != key:
            logger.error("Attachment blob %s was stored under a different name %s", key, saved_name)
            return AttachmentStoreResult(
                key=key, stored=False, error=f"Stored under unexpected name {saved_name}"
            )
        return AttachmentStoreResult(key=key, stored=True)

    def store_many(self, requests: Sequence[AttachmentStoreRequest]) -> list[AttachmentStoreResult]:
        """
        Writes all blobs concurrently and waits for every write to finish.
        Results keep the order of `requests`.
        """
        if not requests:
            return []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(requests))) as executor:
            futures = [
                executor.submit(self.store, request.key, request.media_type, request.stream)
                for request in requests
            ]
            return [future.result() for future in futures]

    def persist_attachment_blobs(
        self, attachments: Sequence[StoredAttachmentModel], streams: Sequence[IO]
    ) -> list[AttachmentStoreResult]:
        """
        Uploads the blobs of already persisted attachment rows and records the outcome in
        `upload_status`. Rows of failed uploads are kept as `failed` for the reconciliation sweep.
        :raises AttachmentStorageError: if any blob could not be written.
        """
        if not attachments:
            return []

        requests = [
            AttachmentStoreRequest(
                key=attachment.name, media_type=attachment.media_type, stream=stream
            )
            for attachment, stream in zip(attachments, streams, strict=True)
        ]
        results = self.store_many(requests)

        stored_keys = [result.key for result in results if result.stored]
        failed_keys = [result.key for result in results if not result.stored]

        model = type(attachments[0])
        organization_id = attachments[0].organization_id
        if stored_keys:
            model.objects.filter_by_organization(organization_id).filter(
                name__in=stored_keys
            ).update(upload_status=AttachmentUploadStatus.STORED)
        if failed_keys:
            model.objects.filter_by_organization(organization_id).filter(
                name__in=failed_keys
            ).update(upload_status=AttachmentUploadStatus.FAILED)

        for attachment in attachments:
            attachment.upload_status = (
                AttachmentUploadStatus.FAILED
                if attachment.name in failed_keys
                else AttachmentUploadStatus.STORED
            )

        if failed_keys:
            logger.error(
                "Failed to store %s of %s attachment blobs for organization %s: %s",
                len(failed_keys),
                len(results),
                organization_id,
                ", ".join(failed_keys),
            )
            raise AttachmentStorageError(failed_keys)

        return results

    def reconcile_attachments(
        self, model: type[StoredAttachmentModel], stale_before: datetime.datetime
    ) -> AttachmentReconciliationSummary:
        """
        Settles attachment rows whose upload didn't complete before `stale_before`.
        Rows whose blob exists are marked `stored`; rows without a blob are deleted, since a row
        pointing at nothing is a defect while an orphan blob is harmless.
        """
        unsettled = model.original_manager.filter(
            upload_status__in=[AttachmentUploadStatus.PENDING, AttachmentUploadStatus.FAILED],
            created__lt=stale_before,
        ).only("id", "name")

        found_ids = []
        missing_ids = []
        for attachment in unsettled.iterator():
            if self.storage.exists(attachment.name):
                found_ids.append(attachment.id)
            else:
                missing_ids.append(attachment.id)

        summary = AttachmentReconciliationSummary()
        if found_ids:
            summary.stored = model.original_manager.filter(id__in=found_ids).update(
                upload_status=AttachmentUploadStatus.STORED
            )
        if missing_ids:
            summary.deleted, _ = model.original_manager.filter(id__in=missing_ids).delete()

        logger.info(
            "Reconciled %s attachments: %s marked as stored, %s deleted",
            model._meta.label,
            summary.stored,
            summary.deleted,
        )
        return summary
