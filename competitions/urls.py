"""URL configuration for competitions app."""

from django.urls import path

from . import views

urlpatterns = [
    # Catalog
    path("list_competitions/", views.list_competitions, name="list_competitions"),
    path("get_competition/", views.get_competition, name="get_competition"),
    path("create_competition/", views.create_competition, name="create_competition"),
    path("update_competition/", views.update_competition, name="update_competition"),
    path("archive_competition/", views.archive_competition, name="archive_competition"),
    path("delete_competition/", views.delete_competition, name="delete_competition"),
    path("seed_competitions/", views.seed_competitions, name="seed_competitions"),
    # Participation
    path("enter_competition/", views.enter_competition, name="enter_competition"),
    path(
        "toggle_saved_competition/",
        views.toggle_saved_competition,
        name="toggle_saved_competition",
    ),
    path("update_progress/", views.update_progress, name="update_progress"),
    path("get_user_dashboard/", views.get_user_dashboard, name="get_user_dashboard"),
    # Submissions
    path("submit_entry/", views.submit_entry, name="submit_entry"),
    path("approve_submission/", views.approve_submission, name="approve_submission"),
    path("get_submissions/", views.get_submissions, name="get_submissions"),
    # Winner selection
    path(
        "list_eligible_competitions/",
        views.list_eligible_competitions,
        name="list_eligible_competitions",
    ),
    path("select_winner/", views.select_winner, name="select_winner"),
]
