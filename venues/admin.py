from django.contrib import admin

from organizations.admin import OrganizationModelAdmin
from venues.models import Venue, VenueAttachment


@admin.register(Venue)
class VenueAdmin(OrganizationModelAdmin):
    list_display = ("id", "name", "organization", "created")
    search_fields = ("name",)
    raw_id_fields = ("organization", "creator")


@admin.register(VenueAttachment)
class VenueAttachmentAdmin(OrganizationModelAdmin):
    list_display = ("id", "name", "venue", "media_type", "upload_status", "created")
    list_filter = ("upload_status", "media_type")
    search_fields = ("name",)
    raw_id_fields = ("organization", "creator", "venue")
