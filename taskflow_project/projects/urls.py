from django.urls import path

from projects import views

app_name = "projects"

urlpatterns = [
    path("bulk-assign", views.bulk_assign, name="bulk-assign"),
    path("<int:task_id>/assign", views.assign, name="assign"),
]
