from django.db import models
from django.conf import settings
from django.utils import timezone


class Notification(models.Model):
    """
    A user-facing, in-app notification.

    The in-app record is the source of truth; email is a
    best-effort side channel recorded by email_sent/email_sent_at.
    The related item reference is loose: deleting the task or
    project leaves the notification with its denormalized fields.
    """

    # =====================================================
    # TYPE (SELECTS THE EMAIL TEMPLATE)
    # =====================================================
    class Type(models.TextChoices):
        TASK_ASSIGNMENT = "task_assignment", "Task assignment"
        DEADLINE_APPROACHING = "deadline_approaching", "Deadline approaching"
        DEADLINE_OVERDUE = "deadline_overdue", "Deadline overdue"
        DEADLINE_EXTENSION = "deadline_extension", "Deadline extension request"
        DEADLINE_EXTENSION_REVIEW = "deadline_extension_review", "Deadline extension review"
        MILESTONE = "milestone", "Milestone added"
        MILESTONE_COMPLETE = "milestone_complete", "Milestone completed"
        VACATION_REQUEST = "vacation_request", "Vacation request"
        GENERAL = "general", "General"

    # =====================================================
    # PRIORITY (UI + SORTING)
    # =====================================================
    class Priority(models.TextChoices):
        LOW = "low", "Low"
        MEDIUM = "medium", "Medium"
        HIGH = "high", "High"
        URGENT = "urgent", "Urgent"

    # =====================================================
    # CORE RELATIONSHIPS
    # =====================================================
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User who receives this notification"
    )

    # =====================================================
    # CLASSIFICATION
    # =====================================================
    type = models.CharField(
        max_length=40,
        choices=Type.choices,
        default=Type.GENERAL,
        db_index=True
    )

    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        db_index=True
    )

    # =====================================================
    # CONTENT
    # =====================================================
    title = models.CharField(
        max_length=200,
        blank=True,
        help_text="Short headline shown in notification list"
    )

    message = models.TextField(
        help_text="Detailed message shown when expanded"
    )

    # =====================================================
    # RELATED ITEM (LOOSE REFERENCE + DISPLAY FIELDS)
    # =====================================================
    task = models.ForeignKey(
        "projects.Task",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications"
    )

    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications"
    )

    related_type = models.CharField(max_length=20, blank=True)
    related_title = models.CharField(max_length=200, blank=True)
    related_project_name = models.CharField(max_length=200, blank=True)

    # Free-form display context (dates of a vacation, deadline, ...)
    related_data = models.JSONField(default=dict, blank=True)

    # =====================================================
    # STATE
    # =====================================================
    is_read = models.BooleanField(
        default=False,
        db_index=True
    )

    read_at = models.DateTimeField(
        null=True,
        blank=True
    )

    email_sent = models.BooleanField(default=False)

    email_sent_at = models.DateTimeField(
        null=True,
        blank=True
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True
    )

    # =====================================================
    # DJANGO META
    # =====================================================
    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read", "created_at"], name="notif_recipient_read_idx"),
            models.Index(fields=["type", "priority"], name="notif_type_priority_idx"),
        ]

    # =====================================================
    # STRING REPRESENTATION
    # =====================================================
    def __str__(self):
        return (
            f"{self.recipient} | "
            f"{self.type.upper()} | "
            f"{self.title}"
        )

    # =====================================================
    # INSTANCE HELPERS
    # =====================================================
    def mark_as_read(self):
        """Safely mark notification as read."""
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_at"])

    def mark_email_sent(self):
        self.email_sent = True
        self.email_sent_at = timezone.now()
        self.save(update_fields=["email_sent", "email_sent_at"])

    # =====================================================
    # BULK HELPERS
    # =====================================================
    @classmethod
    def mark_all_as_read(cls, user, type=None):
        """
        Mark all unread notifications (optionally by type)
        as read for a user.
        """
        qs = cls.objects.filter(recipient=user, is_read=False)
        if type:
            qs = qs.filter(type=type)

        return qs.update(
            is_read=True,
            read_at=timezone.now()
        )
