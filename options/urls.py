from django.urls import path

from options.views import OptionListView, OptionView

app_name = "options"

urlpatterns = [
    path("<str:name>/", OptionView.as_view(), name="option-detail"),
    path("", OptionListView.as_view(), name="option-list"),
]
