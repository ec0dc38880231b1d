from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    In-app notifications with their email delivery state.
    """

    # =====================================================
    # LIST VIEW
    # =====================================================
    list_display = (
        "id",
        "recipient",
        "type",
        "priority",
        "colored_title",
        "is_read",
        "email_sent",
        "created_at",
    )

    list_filter = (
        "type",
        "priority",
        "is_read",
        "email_sent",
        "created_at",
    )

    search_fields = (
        "title",
        "message",
        "related_title",
        "recipient__username",
        "recipient__first_name",
        "recipient__last_name",
    )

    ordering = ("-created_at",)
    list_per_page = 25

    # =====================================================
    # FIELDSETS (DETAIL VIEW)
    # =====================================================
    fieldsets = (
        ("Recipient", {
            "fields": ("recipient",),
        }),
        ("Classification", {
            "fields": ("type", "priority"),
        }),
        ("Content", {
            "fields": ("title", "message"),
        }),
        ("Related item", {
            "fields": (
                "task",
                "project",
                "related_type",
                "related_title",
                "related_project_name",
                "related_data",
            ),
        }),
        ("Status", {
            "fields": (
                "is_read",
                "read_at",
                "email_sent",
                "email_sent_at",
                "created_at",
            ),
        }),
    )

    readonly_fields = (
        "created_at",
        "read_at",
        "email_sent_at",
    )

    actions = (
        "mark_as_read",
        "mark_as_unread",
    )

    # =====================================================
    # CUSTOM DISPLAY HELPERS
    # =====================================================
    def colored_title(self, obj):
        """
        Color the title by priority for fast scanning.
        """
        color_map = {
            Notification.Priority.URGENT: "#dc2626",
            Notification.Priority.HIGH: "#f59e0b",
            Notification.Priority.MEDIUM: "#2563eb",
            Notification.Priority.LOW: "#6b7280",
        }

        color = color_map.get(obj.priority, "#000000")

        return format_html(
            '<span style="color:{}; font-weight:600;">{}</span>',
            color,
            obj.title,
        )

    colored_title.short_description = "Title"

    # =====================================================
    # ADMIN ACTIONS
    # =====================================================
    @admin.action(description="Mark selected notifications as READ")
    def mark_as_read(self, request, queryset):
        queryset.update(is_read=True, read_at=timezone.now())

    @admin.action(description="Mark selected notifications as UNREAD")
    def mark_as_unread(self, request, queryset):
        queryset.update(is_read=False, read_at=None)
