from django.urls import path

from deadlines import views

app_name = "deadlines"

urlpatterns = [
    # Read side
    path("overdue", views.overdue_items, name="overdue"),
    path("upcoming", views.upcoming_deadlines, name="upcoming"),
    path("stats", views.deadline_stats, name="stats"),
    path("calendar", views.calendar_data, name="calendar"),

    # Extension requests
    path("tasks/<int:task_id>/extension", views.request_task_extension, name="task-extension"),
    path("projects/<int:project_id>/extension", views.request_project_extension, name="project-extension"),
    path(
        "<str:item_type>/<int:item_id>/extension/<int:extension_id>",
        views.review_extension_request,
        name="review-extension",
    ),

    # Milestones
    path("projects/<int:project_id>/milestones", views.create_milestone, name="milestone-create"),
    path(
        "projects/<int:project_id>/milestones/<int:milestone_id>/complete",
        views.finish_milestone,
        name="milestone-complete",
    ),
]
