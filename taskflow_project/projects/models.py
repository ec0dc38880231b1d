import math

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from deadlines.thresholds import ThresholdKind


DAY_SECONDS = 24 * 60 * 60


# ============================================================
# SHARED DEADLINE BEHAVIOUR (TASK / PROJECT)
# ============================================================

class DeadlineTrackedItem(models.Model):
    """
    Capabilities shared by every work item:
    has deadline, has status, has assignees.
    """

    # Overridden by subclasses
    TERMINAL_STATUSES = frozenset()
    ITEM_TYPE = ""

    deadline = models.DateTimeField(null=True, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def item_type(self):
        return self.ITEM_TYPE

    @property
    def display_title(self):
        raise NotImplementedError

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def is_overdue(self, now=None):
        if not self.deadline or self.is_terminal:
            return False
        now = now or timezone.now()
        return now > self.deadline

    def overdue_days(self, now=None):
        if not self.is_overdue(now):
            return 0
        now = now or timezone.now()
        return math.ceil((now - self.deadline).total_seconds() / DAY_SECONDS)

    def notification_recipients(self):
        """Users who receive deadline notifications for this item."""
        raise NotImplementedError

    @classmethod
    def open_items(cls):
        return cls.objects.exclude(status__in=cls.TERMINAL_STATUSES)


# ============================================================
# PROJECT
# ============================================================

class Project(DeadlineTrackedItem):
    class Status(models.TextChoices):
        NOT_STARTED = "not_started", "Not started"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"

    TERMINAL_STATUSES = frozenset({Status.COMPLETED.value})
    ITEM_TYPE = "project"

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="projects",
        blank=True,
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.NOT_STARTED,
        db_index=True,
    )

    start_date = models.DateField(null=True, blank=True)

    # in days
    estimated_duration = models.PositiveIntegerField(null=True, blank=True)
    actual_duration = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["deadline", "name"]
        indexes = [
            models.Index(fields=["deadline", "status"], name="project_deadline_status_idx"),
        ]

    @property
    def display_title(self):
        return self.name

    def notification_recipients(self):
        return list(self.members.filter(is_active=True).order_by("pk"))

    def __str__(self):
        return self.name


# ============================================================
# TASK
# ============================================================

class Task(DeadlineTrackedItem):
    class Status(models.TextChoices):
        TODO = "todo", "To do"
        IN_PROGRESS = "in_progress", "In progress"
        DONE = "done", "Done"

    TERMINAL_STATUSES = frozenset({Status.DONE.value})
    ITEM_TYPE = "task"

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="tasks",
    )

    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_tasks",
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.TODO,
        db_index=True,
    )

    estimated_hours = models.FloatField(null=True, blank=True)
    actual_hours = models.FloatField(null=True, blank=True)

    class Meta:
        ordering = ["deadline", "title"]
        indexes = [
            models.Index(fields=["deadline", "status"], name="task_deadline_status_idx"),
            models.Index(fields=["assignee", "deadline"], name="task_assignee_deadline_idx"),
            models.Index(fields=["project", "deadline"], name="task_project_deadline_idx"),
        ]

    @property
    def display_title(self):
        return self.title

    def notification_recipients(self):
        if self.assignee_id and self.assignee.is_active:
            return [self.assignee]
        return []

    def __str__(self):
        return self.title


# ============================================================
# MILESTONE (OWNED BY PROJECT)
# ============================================================

class Milestone(models.Model):
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="milestones",
    )

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    due_date = models.DateTimeField()

    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["due_date", "pk"]

    def __str__(self):
        return f"{self.project} | {self.title}"


# ============================================================
# ITEM-OWNED RECORDS (TASK XOR PROJECT)
# ============================================================

class WorkItemRecord(models.Model):
    """
    Base for rows owned by exactly one Task or Project.
    Stored in their own table keyed by the parent id.
    """

    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="+",
    )

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        abstract = True

    @property
    def work_item(self):
        return self.task if self.task_id else self.project

    @staticmethod
    def owner_filter(item):
        """Keyword filter selecting rows owned by ``item``."""
        return {item.item_type: item}


class DeadlineLedgerEntry(WorkItemRecord):
    """
    Proof that a (item, threshold, recipient) notification was sent.
    """

    threshold = models.CharField(max_length=10, choices=ThresholdKind.choices)

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="deadline_ledger_entries",
    )

    sent_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["sent_at", "pk"]
        constraints = [
            models.UniqueConstraint(
                fields=["task", "threshold", "recipient"],
                condition=Q(task__isnull=False),
                name="unique_task_threshold_recipient",
            ),
            models.UniqueConstraint(
                fields=["project", "threshold", "recipient"],
                condition=Q(project__isnull=False),
                name="unique_project_threshold_recipient",
            ),
        ]

    def __str__(self):
        return f"{self.work_item} | {self.threshold} → {self.recipient}"


class ExtensionRequest(WorkItemRecord):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="extension_requests",
    )

    requested_at = models.DateTimeField(default=timezone.now)

    new_deadline = models.DateTimeField()
    reason = models.TextField(blank=True)

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_extension_requests",
    )

    reviewed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["requested_at", "pk"]

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING

    def __str__(self):
        return f"{self.work_item} | {self.new_deadline:%Y-%m-%d} ({self.status})"
