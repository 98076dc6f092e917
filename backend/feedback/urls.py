"""
Feedback app URL configuration.

    POST /api/feedback/   → FeedbackView
"""

from django.urls import path

from .views import FeedbackView

app_name = "feedback"

urlpatterns = [
    path("feedback/", FeedbackView.as_view(), name="give-feedback"),
]
