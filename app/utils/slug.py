"""
Генерация URL-slug для каталогов.
"""

import re
import unicodedata

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str) -> str:
    """
    Построить slug из названия каталога.

    Название приводится к нижнему регистру, диакритика удаляется,
    все последовательности символов кроме [a-z0-9] заменяются дефисом,
    крайние дефисы отбрасываются.

    Example:
        >>> generate_slug("Tienda Ejemplo Ñandú")
        'tienda-ejemplo-nandu'
    """
    value = unicodedata.normalize("NFD", name.lower())
    value = _COMBINING_MARKS.sub("", value)
    value = _NON_ALNUM.sub("-", value)
    return value.strip("-")


def is_valid_slug(slug: str) -> bool:
    """Slug непустой и уже находится в нормализованной форме."""
    return bool(slug) and generate_slug(slug) == slug
