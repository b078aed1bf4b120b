"""Transactional email and mailing-list notifications."""

from digital_catalog.notifications.dispatcher import NotificationDispatcher
from digital_catalog.notifications.templates import TemplateRenderer

__all__ = ["NotificationDispatcher", "TemplateRenderer"]
