from django.conf import settings

from storages.backends.s3boto3 import S3Boto3Storage


class AttachmentStorage(S3Boto3Storage):
    bucket_name = getattr(settings, "AWS_ATTACHMENTS_BUCKET_NAME", "")
    location = getattr(settings, "AWS_ATTACHMENTS_LOCATION", "")
    # keys are generated and unique, an existing object is never renamed
    file_overwrite = True
    default_acl = None

    if getattr(settings, "AWS_ATTACHMENTS_S3_ENDPOINT_URL", ""):
        endpoint_url = settings.AWS_ATTACHMENTS_S3_ENDPOINT_URL
