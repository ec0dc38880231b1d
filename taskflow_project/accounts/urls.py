from django.urls import path

from accounts import views

app_name = "schedule"

urlpatterns = [
    path("users/<int:user_id>/schedule", views.user_schedule, name="user-schedule"),
    path("users/<int:user_id>/vacation", views.user_vacation, name="user-vacation"),
    path("users/<int:user_id>/availability", views.user_availability, name="user-availability"),

    path("team/availability", views.team_availability_view, name="team-availability"),
    path("team/workload", views.team_workload, name="team-workload"),
]
