"""Read helpers for the ``app_settings`` key/value store.

Values are stored JSON-encoded, so ``""`` is stored as ``'""'`` and objects as
their JSON text.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.models.app_setting import AppSetting

logger = logging.getLogger(__name__)

FEEDBACK_SETTING_TYPE = "feedback"
FEEDBACK_NOTIFICATION_EMAIL_KEY = "feedback_notification_email"
FEEDBACK_RATE_LIMITS_KEY = "feedback_rate_limits"

DEFAULT_FEEDBACK_RATE_LIMITS: dict[str, dict[str, int]] = {
    "rating": {"max": 100, "window": 3600},
    "comment": {"max": 20, "window": 3600},
    "like": {"max": 200, "window": 3600},
}


async def get_setting_value(session: AsyncSession, key: str, default: Any = None) -> Any:
    """Decoded value of ``key``, or ``default`` when the row is missing."""
    raw = (
        await session.execute(
            select(AppSetting.setting_value).where(AppSetting.setting_key == key).limit(1)
        )
    ).scalar_one_or_none()
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("app setting %s is not valid JSON; returning raw text", key)
        return raw


async def get_feedback_rate_limits(session: AsyncSession) -> dict[str, dict[str, int]]:
    """Per-action ``{"max": n, "window": seconds}`` thresholds.

    Stored values override the defaults action by action, so a row that
    omits an action (or a field of one) still yields a full threshold.
    """
    limits = {action: dict(limit) for action, limit in DEFAULT_FEEDBACK_RATE_LIMITS.items()}
    value = await get_setting_value(session, FEEDBACK_RATE_LIMITS_KEY)
    if not isinstance(value, dict):
        return limits
    for action, limit in value.items():
        if isinstance(limit, dict):
            limits.setdefault(action, {}).update(limit)
    return limits
