from django.urls import path

from molecula.interfaces.http import views

urlpatterns = [
    path("surveys/", views.survey_list_view, name="survey_list"),
    path("surveys/new/", views.create_survey_view, name="create_survey"),
    path("surveys/<int:survey_id>/", views.survey_detail_view, name="survey_detail"),
    path("surveys/<int:survey_id>/respond/", views.respond_view, name="respond"),
    path(
        "surveys/<int:survey_id>/results/",
        views.survey_results_view,
        name="survey_results",
    ),
    path(
        "surveys/<int:survey_id>/export.csv",
        views.export_csv_view,
        name="export_csv",
    ),
    path(
        "surveys/<int:survey_id>/delete/",
        views.delete_survey_view,
        name="delete_survey",
    ),
    # User dashboard (single slug catch-all, must come last)
    path("<slug:user_slug>/surveys/", views.dashboard_view, name="dashboard"),
]
