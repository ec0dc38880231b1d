from django.contrib import admin

from .models import (
    DeadlineLedgerEntry,
    ExtensionRequest,
    Milestone,
    Project,
    Task,
)


# ============================================================
# PROJECTS
# ============================================================

class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0
    readonly_fields = ("completed_at", "created_at")


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "status",
        "deadline",
        "start_date",
        "created_at",
    )

    list_filter = (
        "status",
    )

    search_fields = (
        "name",
    )

    filter_horizontal = (
        "members",
    )

    date_hierarchy = "deadline"

    inlines = (
        MilestoneInline,
    )


# ============================================================
# TASKS
# ============================================================

@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "project",
        "assignee",
        "status",
        "deadline",
        "estimated_hours",
    )

    list_filter = (
        "status",
        "project",
    )

    search_fields = (
        "title",
        "assignee__username",
        "assignee__first_name",
        "assignee__last_name",
    )

    autocomplete_fields = (
        "project",
        "assignee",
    )

    date_hierarchy = "deadline"


# ============================================================
# DEADLINE RECORDS
# ============================================================

@admin.register(ExtensionRequest)
class ExtensionRequestAdmin(admin.ModelAdmin):
    list_display = (
        "work_item",
        "requested_by",
        "new_deadline",
        "status",
        "reviewed_by",
        "reviewed_at",
    )

    list_filter = (
        "status",
    )

    readonly_fields = (
        "requested_at",
        "reviewed_at",
    )


@admin.register(DeadlineLedgerEntry)
class DeadlineLedgerEntryAdmin(admin.ModelAdmin):
    """
    Read-only: rows are written by the deadline scan.
    """
    list_display = (
        "work_item",
        "threshold",
        "recipient",
        "sent_at",
    )

    list_filter = (
        "threshold",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
