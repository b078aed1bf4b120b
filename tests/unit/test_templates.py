"""Test email template rendering."""

import pytest

from digital_catalog.core.errors import TemplateNotFound
from digital_catalog.notifications.templates import TemplateRenderer


class TestTemplateRenderer:
    def test_purchase_template(self):
        rendered = TemplateRenderer().render(
            "purchase",
            user_name="Ada",
            book_title="Builder Book",
            book_url="https://x/books/builder-book/introduction",
        )
        assert rendered.subject == "You purchased book at builderbook.org"
        assert rendered.body.startswith("Ada,")
        assert "https://x/books/builder-book/introduction" in rendered.body

    def test_preorder_mentions_title(self):
        rendered = TemplateRenderer().render(
            "preorder", user_name="Ada", book_title="Builder Book", book_url="u",
        )
        assert "Builder Book" in rendered.body

    def test_override_and_missing_params(self):
        renderer = TemplateRenderer({"purchase": ("Hi $user_name", "Read $book_url $extra")})
        rendered = renderer.render("purchase", user_name="Ada", book_url="u")
        assert rendered.subject == "Hi Ada"
        assert rendered.body == "Read u $extra"

    def test_unknown_template(self):
        with pytest.raises(TemplateNotFound):
            TemplateRenderer().render("refund")

    def test_names(self):
        assert TemplateRenderer().names == ["preorder", "purchase"]
