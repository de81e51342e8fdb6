"""
Вспомогательные функции тестов.
"""

import os
from io import BytesIO

from PIL import Image

from app.schemas.product import Product


def make_product(**fields) -> Product:
    """Товар с разумными значениями по умолчанию."""
    fields.setdefault("name", "Product")
    fields.setdefault("id", fields["name"].lower().replace(" ", "-"))
    return Product(**fields)


def make_image(size=(64, 64), fmt: str = "PNG", noise: bool = False) -> bytes:
    """Сгенерировать изображение в памяти."""
    if noise:
        img = Image.frombytes("RGB", size, os.urandom(size[0] * size[1] * 3))
    else:
        img = Image.new("RGB", size, (14, 165, 233))
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()
