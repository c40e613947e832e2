from django.db import models


class Hotel(models.Model):
    """Tenant root. Categories, products and manager accounts belong to one hotel."""
    name = models.CharField(max_length=255)
    slug = models.SlugField(unique=True, max_length=100)
    description = models.TextField(null=True, blank=True)
    time_zone = models.CharField(max_length=64, null=True, blank=True)
    img_qr = models.CharField(
        max_length=500, null=True, blank=True,
        help_text='Absolute URL or /uploads/... path of the hotel QR image',
    )
    metadata = models.JSONField(
        null=True, blank=True,
        help_text='Free-form contact/location data, e.g. {"contact": {...}, "location": {...}}',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name
