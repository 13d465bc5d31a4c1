from celery.schedules import crontab  # type: ignore


CELERYBEAT_SCHEDULE = {
    # Internal tasks
    "clearsessions": {
        "schedule": crontab(hour=3, minute=0),
        "task": "users.tasks.clearsessions",
    },
    "reconcile_attachment_blobs": {
        "schedule": crontab(minute="*/15"),
        "task": "attachments.tasks.reconcile_attachment_blobs_task",
    },
}
