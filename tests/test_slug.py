"""
Тесты генерации slug.
"""

import pytest

from app.utils.slug import generate_slug, is_valid_slug


class TestGenerateSlug:
    """Построение slug из названия каталога."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Tienda Ejemplo", "tienda-ejemplo"),
            ("Café Olé", "cafe-ole"),
            ("  ¡Hola, Mundo!  ", "hola-mundo"),
            ("Ñandú & Co. 2024", "nandu-co-2024"),
            ("---", ""),
            ("", ""),
        ],
    )
    def test_examples(self, name, expected):
        assert generate_slug(name) == expected

    def test_idempotent(self):
        """Повторная генерация не меняет slug."""
        for name in ["Tienda Ejemplo", "Électronique Générale", "a__b--c"]:
            slug = generate_slug(name)
            assert generate_slug(slug) == slug

    def test_only_allowed_characters(self):
        slug = generate_slug("Zapatería «El Niño» #1 (Sucursal)")
        assert slug == "zapateria-el-nino-1-sucursal"
        assert not slug.startswith("-") and not slug.endswith("-")


class TestIsValidSlug:
    def test_valid(self):
        assert is_valid_slug("tienda-ejemplo")
        assert is_valid_slug("a1")

    @pytest.mark.parametrize("slug", ["", "Tienda", "-tienda", "tienda-", "tienda ejemplo", "a--b"])
    def test_invalid(self, slug):
        assert not is_valid_slug(slug)
