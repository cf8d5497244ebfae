"""Models package — re-export all ORM classes for Alembic auto-detection."""
from gallery.models.event import Event  # noqa: F401
from gallery.models.photo import Photo  # noqa: F401
from gallery.models.app_setting import AppSetting  # noqa: F401
from gallery.models.feedback import (  # noqa: F401
    EventFeedbackSettings,
    FeedbackRateLimit,
    FeedbackType,
    FeedbackWordFilter,
    PhotoFeedback,
    WordSeverity,
)
