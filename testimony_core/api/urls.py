# testimony_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from testimony_core.audit.api.views import AuditLogViewSet
from testimony_core.elearning.api.views import ELearningViewSet
from testimony_core.iam.api.auth import LoginView, LogoutView, PhoneLoginView, RefreshView
from testimony_core.iam.api.me import MeView
from testimony_core.iam.api.users import AdminUserViewSet
from testimony_core.moderation.api.views import LandMappingViewSet, ModerationPostViewSet, ModerationSummaryView
from testimony_core.posts.api.views import CoordinateSubmitView, FeedView, PostViewSet, TestimonySubmitView

router = DefaultRouter()

# Owner / public
router.register(r"posts", PostViewSet, basename="posts")
router.register(r"elearning", ELearningViewSet, basename="elearning")

# Admin surfaces
router.register(r"moderation/posts", ModerationPostViewSet, basename="moderation-posts")
router.register(r"moderation/land-mapping", LandMappingViewSet, basename="moderation-land-mapping")
router.register(r"admin/users", AdminUserViewSet, basename="admin-users")
router.register(r"admin/audit-logs", AuditLogViewSet, basename="admin-audit-logs")

urlpatterns = [
    # Auth + /me
    path("auth/phone-login/", PhoneLoginView.as_view(), name="phone-login"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Submissions + public feed
    path("testimonies/", TestimonySubmitView.as_view(), name="testimony-submit"),
    path("coordinates/", CoordinateSubmitView.as_view(), name="coordinate-submit"),
    path("feed/", FeedView.as_view(), name="feed"),

    path("moderation/summary/", ModerationSummaryView.as_view(), name="moderation-summary"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
