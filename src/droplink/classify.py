from __future__ import annotations

from .locators import Locator

IMAGE_FILE_EXTENSIONS = frozenset(
    {
        "bmp",
        "gif",
        "ico",
        "jpe",
        "jpeg",
        "jpg",
        "png",
        "psd",
        "svg",
        "tga",
        "tif",
        "tiff",
        "webp",
    }
)


def image_extension(locator: Locator) -> str:
    ext = locator.extname().lower()
    return ext[1:] if ext.startswith(".") else ext


def is_image_uri(locator: Locator, insert_as_image: bool | None = None) -> bool:
    """Decide between ``![...](...)`` and ``[...](...)`` for a locator."""
    if insert_as_image is not None:
        return bool(insert_as_image)
    return image_extension(locator) in IMAGE_FILE_EXTENSIONS
