from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError


class User(AbstractUser):
    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        MANAGER = "manager", "Manager"
        MEMBER = "member", "Member"

    # Roles that review extension requests and vacation requests
    REVIEWER_ROLES = (Role.ADMIN, Role.MANAGER)

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.MEMBER,
        db_index=True,
    )

    department = models.CharField(max_length=150, blank=True)

    timezone = models.CharField(max_length=64, default="UTC")

    max_hours_per_week = models.PositiveIntegerField(default=40)

    # hours per week
    current_workload = models.FloatField(default=0)

    preferred_start_time = models.TimeField(null=True, blank=True)
    preferred_end_time = models.TimeField(null=True, blank=True)

    @property
    def display_name(self):
        return self.get_full_name() or self.username

    def __str__(self):
        full = self.get_full_name()
        return f"{full} ({self.username})" if full else self.username


# ============================================================
# WEEKLY SCHEDULE
# ============================================================

class WorkDay(models.Model):
    """
    One entry of a user's recurring weekly schedule.

    A user without rows falls back to the default pattern
    (Mon–Fri 09:00–17:00 available, weekends unavailable).
    """

    class Weekday(models.TextChoices):
        MONDAY = "monday", "Monday"
        TUESDAY = "tuesday", "Tuesday"
        WEDNESDAY = "wednesday", "Wednesday"
        THURSDAY = "thursday", "Thursday"
        FRIDAY = "friday", "Friday"
        SATURDAY = "saturday", "Saturday"
        SUNDAY = "sunday", "Sunday"

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="work_days",
    )

    weekday = models.CharField(max_length=10, choices=Weekday.choices)

    start_time = models.TimeField()
    end_time = models.TimeField()

    available = models.BooleanField(default=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "weekday"],
                name="unique_user_weekday",
            ),
        ]

    def __str__(self):
        state = "available" if self.available else "off"
        return f"{self.user} | {self.get_weekday_display()} ({state})"


# ============================================================
# VACATIONS
# ============================================================

class VacationPeriod(models.Model):
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="vacation_periods",
    )

    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["start_date"]
        indexes = [
            models.Index(fields=["user", "start_date", "end_date"], name="vacation_user_range_idx"),
        ]

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("Vacation end date cannot be before its start date.")

    def covers(self, day):
        return self.start_date <= day <= self.end_date

    def __str__(self):
        return f"{self.user} | {self.start_date} → {self.end_date}"
