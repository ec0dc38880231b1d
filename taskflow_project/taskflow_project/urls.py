from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # DJANGO ADMIN (CRUD FOR USERS / TASKS / PROJECTS)
    path("admin/", admin.site.urls),

    # JSON API
    path("deadlines/", include("deadlines.urls")),
    path("cron/", include("deadlines.urls_cron")),
    path("schedule/", include("accounts.urls")),
    path("tasks/", include("projects.urls")),
    path("notifications/", include("notifications.urls")),
]
