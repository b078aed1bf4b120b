"""Transactional email templates.

Templates are ``string.Template`` pairs (subject, body) keyed by name.
Placeholders: ``$user_name``, ``$book_title``, ``$book_url``.
"""

from __future__ import annotations

from string import Template

from digital_catalog.core.enums import EmailTemplateName
from digital_catalog.core.errors import TemplateNotFound
from digital_catalog.core.models import RenderedTemplate

DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    EmailTemplateName.PURCHASE.value: (
        "You purchased book at builderbook.org",
        "$user_name,\n\n"
        "Thank you for purchasing our book! You will get confirmation "
        "email from Stripe shortly.\n\n"
        "Start reading your book: $book_url\n\n"
        "If you have any questions while reading the book, please fill out "
        "an issue on Github.\n\n"
        "Kelly & Timur, Team Builder Book\n",
    ),
    EmailTemplateName.PREORDER.value: (
        "Pre-order at builderbook.org",
        "$user_name,\n\n"
        "Thank you for pre-ordering our book! You will get confirmation "
        "email from Stripe shortly.\n\n"
        "We will email you when $book_title is released. When it is, "
        "start reading here: $book_url\n\n"
        "Kelly & Timur, Team Builder Book\n",
    ),
}


class TemplateRenderer:
    """Renders named templates with ``safe_substitute``.

    Unknown placeholders are left in place rather than raising.
    """

    def __init__(self, templates: dict[str, tuple[str, str]] | None = None) -> None:
        self._templates = dict(DEFAULT_TEMPLATES)
        if templates:
            self._templates.update(templates)

    def render(self, name: str, **params: str) -> RenderedTemplate:
        try:
            subject, body = self._templates[name]
        except KeyError:
            raise TemplateNotFound(f"No email template named {name!r}") from None
        return RenderedTemplate(
            subject=Template(subject).safe_substitute(params),
            body=Template(body).safe_substitute(params),
        )

    @property
    def names(self) -> list[str]:
        return sorted(self._templates)
