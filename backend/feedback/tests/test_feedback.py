"""
Integration tests — feedback on resolved complaints.

Endpoint under test:  POST /api/feedback/   (named URL: feedback:give-feedback)
Payload:              {"complaintId", "rating", "comment"?}
Success response:     HTTP 201
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import Role
from complaints.models import Complaint, ComplaintStatus
from feedback.models import Feedback

User = get_user_model()


def _client_for(user) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
    return client


class TestGiveFeedback(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.student = User.objects.create_user(
            email="fb_student@example.com", password="Str0ng!Pass61",
            name="FB Student", role=Role.STUDENT,
        )
        cls.other_student = User.objects.create_user(
            email="fb_other@example.com", password="Str0ng!Pass62",
            name="FB Other", role=Role.STUDENT,
        )
        cls.worker = User.objects.create_user(
            email="fb_worker@example.com", password="Str0ng!Pass63",
            name="FB Worker", role=Role.WORKER, category="General",
        )

    def setUp(self):
        self.client = _client_for(self.student)
        self.url = reverse("feedback:give-feedback")
        self.complaint = self._complaint(ComplaintStatus.RESOLVED)

    def _complaint(self, complaint_status: str) -> Complaint:
        return Complaint.objects.create(
            title="Blocked drain",
            description="Shower drain is blocked.",
            location="Block G",
            category="Plumbing",
            student=self.student,
            assigned_to=None if complaint_status == ComplaintStatus.PENDING else self.worker,
            status=complaint_status,
        )

    def _post(self, client=None, **body):
        payload = {"complaintId": self.complaint.pk, "rating": 5, "comment": "Great"}
        payload.update(body)
        return (client or self.client).post(self.url, payload, format="json")

    def test_give_feedback_returns_201(self):
        resp = self._post()

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        self.assertEqual(resp.data["message"], "Feedback created successfully")
        data = resp.data["data"]
        self.assertEqual(data["complaintId"], self.complaint.pk)
        self.assertEqual(data["studentId"], self.student.pk)
        self.assertEqual(data["rating"], 5)
        self.assertEqual(data["comment"], "Great")

    def test_comment_is_optional(self):
        resp = self.client.post(
            self.url, {"complaintId": self.complaint.pk, "rating": 3}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        self.assertIsNone(Feedback.objects.get(complaint=self.complaint).comment)

    def test_duplicate_feedback_returns_409(self):
        self._post()

        resp = self._post(rating=1)

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["message"], "Feedback already submitted for this complaint")
        self.assertEqual(Feedback.objects.get(complaint=self.complaint).rating, 5)

    def test_feedback_before_resolution_returns_409(self):
        for complaint_status in (
            ComplaintStatus.PENDING,
            ComplaintStatus.IN_PROGRESS,
            ComplaintStatus.REOPENED,
        ):
            complaint = self._complaint(complaint_status)
            resp = self._post(complaintId=complaint.pk)
            self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT, msg=complaint_status)

        self.assertEqual(Feedback.objects.count(), 0)

    def test_non_owner_cannot_give_feedback(self):
        for user in (self.other_student, self.worker):
            resp = self._post(client=_client_for(user))
            self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN, msg=user.role)
            self.assertEqual(
                resp.data["message"], "You can only give feedback on your own complaint",
            )

    def test_unknown_complaint_returns_404(self):
        resp = self._post(complaintId=999999)

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_rating_out_of_range_returns_400(self):
        for rating in (0, 6, -1):
            resp = self._post(rating=rating)
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, msg=rating)

        self.assertEqual(Feedback.objects.count(), 0)

    def test_missing_rating_returns_400(self):
        resp = self.client.post(self.url, {"complaintId": self.complaint.pk}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["message"], "Complaint ID and rating are required")

    def test_comment_too_long_returns_400(self):
        resp = self._post(comment="x" * 501)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["message"], "Comment too long")

    def test_comment_at_limit_accepted(self):
        resp = self._post(comment="x" * 500)

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
