from django.db import models


class AttributeDataType(models.TextChoices):
    TEXT = 'TEXT', 'Text'
    NUMBER = 'NUMBER', 'Number'
    BOOLEAN = 'BOOLEAN', 'Boolean'
    JSON = 'JSON', 'JSON'


class Category(models.Model):
    hotel = models.ForeignKey(
        'hotels.Hotel', on_delete=models.CASCADE, related_name='categories',
    )
    name = models.CharField(max_length=255)
    key = models.CharField(max_length=100)
    description = models.TextField(null=True, blank=True)
    unit_of_measure = models.CharField(max_length=50, null=True, blank=True)
    # Children are detached, not deleted, when their parent goes away
    parent = models.ForeignKey(
        'self', on_delete=models.SET_NULL, null=True, blank=True,
        related_name='children',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'categories'
        constraints = [
            models.UniqueConstraint(
                fields=['hotel', 'key'], name='catalog_category_hotel_key_unique',
            ),
        ]

    def __str__(self):
        return f'{self.name} ({self.key})'


class CategoryAttributeDefinition(models.Model):
    """Typed field that products in the category can fill in."""
    category = models.ForeignKey(
        Category, on_delete=models.CASCADE, related_name='attributes',
    )
    name = models.CharField(max_length=255)
    key = models.CharField(max_length=100)
    type = models.CharField(max_length=10, choices=AttributeDataType.choices)
    is_required = models.BooleanField(default=False)
    unit_of_measure = models.CharField(max_length=50, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'key'], name='catalog_attribute_category_key_unique',
            ),
        ]

    def __str__(self):
        return f'{self.category.key}.{self.key}'


class CategoryAttributeOption(models.Model):
    definition = models.ForeignKey(
        CategoryAttributeDefinition, on_delete=models.CASCADE, related_name='options',
    )
    label = models.CharField(max_length=255)
    value = models.CharField(max_length=255)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ['sort_order', 'id']

    def __str__(self):
        return self.label


class Product(models.Model):
    hotel = models.ForeignKey(
        'hotels.Hotel', on_delete=models.CASCADE, related_name='products',
    )
    name = models.CharField(max_length=255)
    slug = models.CharField(max_length=100)
    description = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    stock = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    images = models.JSONField(default=list, blank=True)
    base_unit = models.CharField(max_length=50, null=True, blank=True)
    categories = models.ManyToManyField(
        Category, through='ProductCategory', related_name='products', blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['hotel', 'slug'], name='catalog_product_hotel_slug_unique',
            ),
        ]

    def __str__(self):
        return self.name


class ProductCategory(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='category_links')
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='product_links')
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'category'], name='catalog_product_category_unique',
            ),
        ]


class ProductVariantGroup(models.Model):
    class SelectionType(models.TextChoices):
        SINGLE = 'SINGLE', 'Single'
        MULTIPLE = 'MULTIPLE', 'Multiple'

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variant_groups')
    name = models.CharField(max_length=255)
    key = models.CharField(max_length=100)
    selection_type = models.CharField(
        max_length=10, choices=SelectionType.choices, default=SelectionType.SINGLE,
    )
    is_required = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f'{self.product.slug}:{self.key}'


class ProductVariantOption(models.Model):
    group = models.ForeignKey(ProductVariantGroup, on_delete=models.CASCADE, related_name='options')
    name = models.CharField(max_length=255)
    value = models.CharField(max_length=255)
    price_delta = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_available = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ['sort_order', 'id']

    def __str__(self):
        return self.name


class ProductAttributeValue(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='attribute_values')
    attribute = models.ForeignKey(
        CategoryAttributeDefinition, on_delete=models.CASCADE, related_name='product_values',
    )
    # null=True keeps a JSON null as SQL NULL
    value = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'attribute'], name='catalog_product_attribute_unique',
            ),
        ]


class ProductCustomAttribute(models.Model):
    """Product-specific attribute with no category-level definition behind it."""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='custom_attributes')
    name = models.CharField(max_length=255)
    key = models.CharField(max_length=100)
    type = models.CharField(max_length=10, choices=AttributeDataType.choices)
    value = models.JSONField(null=True, blank=True)
    unit_of_measure = models.CharField(max_length=50, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']


class ProductBundleItem(models.Model):
    """``parent_product`` contains ``quantity`` units of ``item_product``."""
    parent_product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='bundle_items')
    item_product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='bundles')
    quantity = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['parent_product', 'item_product'], name='catalog_bundle_item_unique',
            ),
        ]
