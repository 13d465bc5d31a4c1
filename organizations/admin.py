from django.contrib import admin
from django.http import HttpRequest

from organizations.models import Organization, OrganizationMembership


class OrganizationModelAdmin(admin.ModelAdmin):
    """Admin views span organizations, so they read through the unscoped manager."""

    def get_queryset(self, request: HttpRequest):
        return self.model.original_manager.all()


class OrganizationMembershipInline(admin.TabularInline):
    model = OrganizationMembership
    raw_id_fields = ("user",)
    extra = 0


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "created")
    search_fields = ("name",)
    inlines = (OrganizationMembershipInline,)
