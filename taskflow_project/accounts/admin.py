from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, VacationPeriod, WorkDay


# ============================================================
# SCHEDULE INLINES
# ============================================================

class WorkDayInline(admin.TabularInline):
    """
    Weekly pattern. No rows means Mon-Fri 09:00-17:00.
    """
    model = WorkDay
    extra = 0
    max_num = 7


class VacationPeriodInline(admin.TabularInline):
    model = VacationPeriod
    extra = 0
    readonly_fields = ("created_at",)


# ============================================================
# USER ADMIN
# ============================================================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("username",)

    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "role",
        "department",
        "max_hours_per_week",
        "is_active",
    )

    list_filter = (
        "role",
        "department",
        "is_active",
        "is_staff",
    )

    search_fields = (
        "username",
        "email",
        "first_name",
        "last_name",
    )

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Work Information", {
            "fields": (
                "role",
                "department",
                "timezone",
                "max_hours_per_week",
                "current_workload",
                "preferred_start_time",
                "preferred_end_time",
            )
        }),
    )

    inlines = (
        WorkDayInline,
        VacationPeriodInline,
    )


@admin.register(VacationPeriod)
class VacationPeriodAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "start_date",
        "end_date",
        "reason",
        "created_at",
    )

    search_fields = (
        "user__username",
        "user__first_name",
        "user__last_name",
    )

    autocomplete_fields = (
        "user",
    )

    date_hierarchy = "start_date"
