"""Unit tests for translation resolution."""

import pytest

from entityhydrator.context import RequestContext
from entityhydrator.entities.catalog import (
    Channel,
    Product,
    ProductOption,
    ProductOptionTranslation,
    ProductTranslation,
    ProductVariant,
)
from entityhydrator.paths import bind_relation_tree, parse_relation_paths
from entityhydrator.translation import TranslationResolver, select_translation, translate_entity


def product_translations() -> list[ProductTranslation]:
    return [
        ProductTranslation(id=1, language_code="en", name="Laptop", slug="laptop"),
        ProductTranslation(id=2, language_code="de", name="Klapprechner", slug="klapprechner"),
    ]


def context(language_code: str | None, channel_language: str = "en") -> RequestContext:
    return RequestContext(
        channel=Channel(id=1, code="default", default_language_code=channel_language),
        language_code=language_code,
    )


class TestSelectTranslation:
    """Tests for select_translation()."""

    def test_first_matching_code_wins(self) -> None:
        selected = select_translation(product_translations(), ["de", "en"])
        assert selected.language_code == "de"

    def test_falls_back_through_codes(self) -> None:
        selected = select_translation(product_translations(), ["fr", "en"])
        assert selected.language_code == "en"

    def test_falls_back_to_first_translation(self) -> None:
        selected = select_translation(product_translations(), ["fr"])
        assert selected.language_code == "en"

    def test_no_translations(self) -> None:
        assert select_translation([], ["en"]) is None


class TestTranslateEntity:
    """Tests for translate_entity()."""

    def test_projects_fields_onto_entity(self) -> None:
        product = Product(id=1, translations=product_translations())

        assert translate_entity(product, ["de"]) is True
        assert product.name == "Klapprechner"
        assert product.slug == "klapprechner"
        assert product.language_code == "de"

    def test_translation_id_is_not_projected(self) -> None:
        product = Product(id=1, translations=product_translations())
        translate_entity(product, ["de"])
        assert product.id == 1

    def test_translations_collection_is_kept(self) -> None:
        product = Product(id=1, translations=product_translations())
        translate_entity(product, ["en"])
        assert len(product.translations) == 2

    def test_unloaded_translations_leave_entity_alone(self) -> None:
        product = Product(id=1, name="Untouched")

        assert translate_entity(product, ["en"]) is False
        assert product.name == "Untouched"
        assert product.language_code is None


class TestTranslationResolver:
    """Tests for TranslationResolver."""

    def test_language_code_order(self) -> None:
        resolver = TranslationResolver(default_language_code="en")
        assert resolver.language_codes(context("de", channel_language="fr")) == ["de", "en", "fr"]

    def test_language_codes_are_unique(self) -> None:
        resolver = TranslationResolver(default_language_code="en")
        assert resolver.language_codes(context(None)) == ["en"]

    def test_channel_default_language_is_used(self) -> None:
        """Without a request or configured match, the channel language applies."""
        product = Product(
            id=1,
            translations=[
                ProductTranslation(id=1, language_code="fr", name="Portable", slug="portable"),
                ProductTranslation(id=2, language_code="de", name="Klapprechner", slug="k"),
            ],
        )
        tree = bind_relation_tree(parse_relation_paths(["translations"]), Product)

        TranslationResolver("en").translate(context("it", channel_language="de"), product, tree)

        assert product.name == "Klapprechner"

    @pytest.mark.parametrize(
        ("language_code", "expected"),
        [("de", "13 Zoll"), ("en", "13 inch"), ("fr", "13 inch")],
    )
    def test_translates_at_every_depth(self, language_code: str, expected: str) -> None:
        option = ProductOption(
            id=1,
            code="13-inch",
            translations=[
                ProductOptionTranslation(id=1, language_code="en", name="13 inch"),
                ProductOptionTranslation(id=2, language_code="de", name="13 Zoll"),
            ],
        )
        product = Product(
            id=1,
            translations=product_translations(),
            variants=[ProductVariant(id=1, sku="A", options=[option])],
        )
        tree = bind_relation_tree(parse_relation_paths(["variants.options"]), Product)

        translated = TranslationResolver("en").translate(context(language_code), product, tree)

        assert option.name == expected
        # product and option; the variant has no loaded translations
        assert translated == 2
