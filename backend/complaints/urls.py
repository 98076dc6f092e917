"""
Complaints app URL configuration.

All routes are registered under the ``/api/complaints/`` prefix.

Route Hierarchy
---------------
  /api/complaints/                       → list / create
  /api/complaints/{id}/                  → retrieve / destroy

  ── Workflow @actions ───────────────────────────────────────────
  POST /api/complaints/accept/           → worker claims a complaint
  POST /api/complaints/update-status/    → assigned worker moves status
  POST /api/complaints/{id}/reopen/      → owning student reopens
  GET  /api/complaints/stats/            → warden / staff counters
"""

from rest_framework.routers import DefaultRouter

from .views import ComplaintViewSet

router = DefaultRouter()
router.register(
    prefix=r"complaints",
    viewset=ComplaintViewSet,
    basename="complaint",
)

urlpatterns = router.urls
