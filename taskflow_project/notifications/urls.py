from django.urls import path

from notifications import views

app_name = "notifications"

urlpatterns = [
    path("users/<int:user_id>", views.user_notifications, name="user-notifications"),
    path("users/<int:user_id>/read-all", views.read_all_notifications, name="read-all"),
    path("<int:notification_id>/read", views.read_notification, name="read"),
]
