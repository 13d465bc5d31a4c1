import datetime
from typing import Annotated

from django.apps import apps
from django.conf import settings
from django.utils import timezone

from dependency_injector.wiring import Provide, inject

from attachments.models import StoredAttachmentModel
from attachments.services.attachment_storage_service import AttachmentStorageService
from events_api.celery import app


def get_stored_attachment_models() -> list[type[StoredAttachmentModel]]:
    return [
        model
        for model in apps.get_models()
        if issubclass(model, StoredAttachmentModel) and not model._meta.abstract
    ]


@app.task
@inject
def reconcile_attachment_blobs_task(
    attachment_storage_service: Annotated[
        AttachmentStorageService, Provide["attachment_storage_service"]
    ],
):
    """
    Periodic sweep settling attachment rows left `pending` or `failed` by interrupted or failed
    uploads.
    """
    stale_before = timezone.now() - datetime.timedelta(
        minutes=settings.ATTACHMENT_RECONCILIATION_GRACE_MINUTES
    )
    totals = {"stored": 0, "deleted": 0}
    for model in get_stored_attachment_models():
        summary = attachment_storage_service.reconcile_attachments(model, stale_before)
        totals["stored"] += summary.stored
        totals["deleted"] += summary.deleted
    return totals
