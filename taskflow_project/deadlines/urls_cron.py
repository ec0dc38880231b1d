from django.urls import path

from deadlines import views

app_name = "cron"

urlpatterns = [
    path("status", views.cron_status, name="status"),
]
