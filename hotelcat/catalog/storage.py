import logging
import os
import re
import secrets
import unicodedata

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)

IMAGE_TYPE_QR = 'qr'
IMAGE_TYPE_CATEGORY = 'category'
IMAGE_TYPE_PRODUCT = 'product'
IMAGE_TYPES = (IMAGE_TYPE_QR, IMAGE_TYPE_CATEGORY, IMAGE_TYPE_PRODUCT)

_COMBINING_MARKS = re.compile(r'[\u0300-\u036f]')
_UNSAFE_CHARS = re.compile(r'[^a-z0-9-_]')
_DASH_RUNS = re.compile(r'-+')


def sanitize_segment(value, fallback):
    """Reduce ``value`` to a lowercase [a-z0-9-_] path segment, or ``fallback``."""
    if not value:
        return fallback
    value = _COMBINING_MARKS.sub('', unicodedata.normalize('NFKD', value))
    value = _UNSAFE_CHARS.sub('-', value.lower())
    value = _DASH_RUNS.sub('-', value).strip('-')
    return value or fallback


def generate_filename(original_name):
    stem = os.path.splitext(os.path.basename(original_name or ''))[0]
    return f'{sanitize_segment(stem, "image")}-{secrets.token_hex(6)}.webp'


def build_relative_path(hotel_slug, image_type, filename, category_key=None, product_slug=None):
    hotel_segment = sanitize_segment(hotel_slug, 'hotel')
    if image_type == IMAGE_TYPE_QR:
        return f'{hotel_segment}/qr/{filename}'
    if image_type == IMAGE_TYPE_CATEGORY:
        return f'{hotel_segment}/categories/{sanitize_segment(category_key, "general")}/{filename}'
    return f'{hotel_segment}/products/{sanitize_segment(product_slug, "general")}/{filename}'


def save_hotel_image(hotel, image_type, content, original_name, category_key=None, product_slug=None):
    """Store already re-encoded image bytes under the hotel's upload tree.

    Returns ``(relative_path, size)``; the file is served at MEDIA_URL + relative_path.
    """
    data = content.getvalue()
    relative_path = build_relative_path(
        hotel.slug, image_type, generate_filename(original_name),
        category_key=category_key, product_slug=product_slug,
    )
    stored_path = default_storage.save(relative_path, ContentFile(data))
    logger.info(
        'Stored %s image for hotel %s at %s%s (%d bytes)',
        image_type, hotel.pk, settings.MEDIA_URL, stored_path, len(data),
    )
    return stored_path, len(data)
