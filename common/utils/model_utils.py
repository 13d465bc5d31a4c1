import logging
from collections.abc import Callable
from typing import TypeVar

from django.db import models

from cuid2 import cuid_wrapper

from common.exceptions import UnexpectedError


logger = logging.getLogger(__name__)


def generate_unique_id():
    cuid_generator: Callable[[], str] = cuid_wrapper()
    return cuid_generator()


AnyModel = TypeVar("AnyModel", bound=models.Model)


def insert_model_instance(instance: AnyModel) -> AnyModel:
    """
    Saves a new `instance` and checks the database handed back a primary key.
    :raises UnexpectedError: if the insert produced no primary key.
    """
    instance.save()
    if instance.pk is None:
        logger.error(
            "Insert of %s for organization %s returned no primary key",
            instance._meta.label,
            getattr(instance, "organization_id", None),
        )
        raise UnexpectedError(f"Insert of {instance._meta.label} returned no primary key")
    return instance
