import io

from PIL import Image, ImageOps

from hotelcat.exceptions import AppError, PayloadTooLarge

from .models import AttributeDataType

MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5 MB
MAX_DIMENSION = 2048
OUTPUT_FORMAT = 'WEBP'
OUTPUT_QUALITY = 80


def validate_image_upload(file):
    """Validate an uploaded image and re-encode it for storage.

    1. Check file size <= 5MB
    2. Require an image/* content type
    3. Decode with Pillow (rejects anything that is not really an image)
    4. Apply EXIF orientation, then drop the metadata on re-encode
    5. Resize to max 2048px longest edge
    6. Re-encode as WebP

    Returns a BytesIO positioned at 0.
    """
    if file.size > MAX_IMAGE_SIZE:
        raise PayloadTooLarge(
            f'Image file too large. Maximum size is {MAX_IMAGE_SIZE // (1024 * 1024)} MB.'
        )

    content_type = getattr(file, 'content_type', None) or ''
    if not content_type.startswith('image/'):
        raise AppError('Only image files are allowed')

    try:
        file.seek(0)
        img = Image.open(file)
        img.verify()
        file.seek(0)
        img = Image.open(file)  # Re-open after verify
        img.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError):
        raise AppError('Invalid or corrupted image file.')

    img = ImageOps.exif_transpose(img)

    if max(img.size) > MAX_DIMENSION:
        img.thumbnail((MAX_DIMENSION, MAX_DIMENSION), Image.LANCZOS)

    if img.mode not in ('RGB', 'RGBA'):
        img = img.convert('RGBA' if img.mode in ('LA', 'PA', 'P') else 'RGB')

    buffer = io.BytesIO()
    img.save(buffer, format=OUTPUT_FORMAT, quality=OUTPUT_QUALITY)
    buffer.seek(0)
    return buffer


def value_matches_type(value, data_type):
    """JSON null is accepted for every attribute type."""
    if value is None or data_type == AttributeDataType.JSON:
        return True
    if data_type == AttributeDataType.TEXT:
        return isinstance(value, str)
    if data_type == AttributeDataType.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if data_type == AttributeDataType.BOOLEAN:
        return isinstance(value, bool)
    return False


def value_in_options(value, option_values):
    if value is None or not option_values:
        return True
    if isinstance(value, (dict, list, bool)):
        return False
    return value in option_values or str(value) in option_values
