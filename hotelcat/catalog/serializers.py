from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from rest_framework import serializers

from hotels.serializers import UrlOrPathField

from .models import (
    AttributeDataType, Category, CategoryAttributeDefinition, CategoryAttributeOption,
    Product, ProductAttributeValue, ProductBundleItem, ProductCustomAttribute,
    ProductVariantGroup, ProductVariantOption,
)
from .storage import IMAGE_TYPE_CATEGORY, IMAGE_TYPE_PRODUCT, IMAGE_TYPES
from .validators import value_matches_type

CENT = Decimal('0.01')


class PriceField(serializers.DecimalField):
    """Money amount: accepts JSON numbers or numeric strings, keeps two decimal
    places (half-up) and is rendered back as a string."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 12)
        kwargs.setdefault('decimal_places', 2)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail('invalid')
        try:
            amount = Decimal(str(data).strip()).quantize(CENT, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError):
            self.fail('invalid')
        return super().to_internal_value(str(amount))


def _reject_duplicates(values, message):
    if len(values) != len(set(values)):
        raise serializers.ValidationError(message)


def _require_some_field(data):
    if not data:
        raise serializers.ValidationError('At least one field must be provided')
    return data


# ---------------------------------------------------------------------------
# Category output
# ---------------------------------------------------------------------------

class CategoryAttributeOptionSerializer(serializers.ModelSerializer):
    definitionId = serializers.IntegerField(source='definition_id', read_only=True)
    sortOrder = serializers.IntegerField(source='sort_order', read_only=True)

    class Meta:
        model = CategoryAttributeOption
        fields = ['id', 'definitionId', 'label', 'value', 'sortOrder']
        read_only_fields = fields


class CategoryAttributeDefinitionSerializer(serializers.ModelSerializer):
    categoryId = serializers.IntegerField(source='category_id', read_only=True)
    isRequired = serializers.BooleanField(source='is_required', read_only=True)
    unitOfMeasure = serializers.CharField(source='unit_of_measure', read_only=True)
    options = CategoryAttributeOptionSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = CategoryAttributeDefinition
        fields = [
            'id', 'categoryId', 'name', 'key', 'type', 'isRequired',
            'unitOfMeasure', 'options', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class CategorySummarySerializer(serializers.ModelSerializer):
    hotelId = serializers.IntegerField(source='hotel_id', read_only=True)
    unitOfMeasure = serializers.CharField(source='unit_of_measure', read_only=True)
    parentId = serializers.IntegerField(source='parent_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Category
        fields = [
            'id', 'hotelId', 'name', 'key', 'description', 'unitOfMeasure',
            'parentId', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class CategorySerializer(CategorySummarySerializer):
    """Category with optional ``attributes``, ``children`` and ``parent``.

    Which of them are rendered is driven by the ``include_attributes``,
    ``include_children`` and ``include_parent`` context flags.
    """
    attributes = CategoryAttributeDefinitionSerializer(many=True, read_only=True)
    children = serializers.SerializerMethodField()
    parent = CategorySummarySerializer(read_only=True)

    class Meta(CategorySummarySerializer.Meta):
        fields = CategorySummarySerializer.Meta.fields + ['attributes', 'children', 'parent']
        read_only_fields = fields

    def get_fields(self):
        fields = super().get_fields()
        if not self.context.get('include_attributes'):
            fields.pop('attributes')
        if not self.context.get('include_children'):
            fields.pop('children')
        if not self.context.get('include_parent'):
            fields.pop('parent')
        return fields

    def get_children(self, obj):
        context = {**self.context, 'include_children': False, 'include_parent': False}
        return CategorySerializer(obj.children.all(), many=True, context=context).data


# ---------------------------------------------------------------------------
# Category input
# ---------------------------------------------------------------------------

class AttributeOptionInputSerializer(serializers.Serializer):
    label = serializers.CharField(min_length=1, max_length=255)
    value = serializers.CharField(min_length=1, max_length=255)
    sortOrder = serializers.IntegerField(source='sort_order', default=0)


class AttributeOptionUpdateSerializer(serializers.Serializer):
    label = serializers.CharField(min_length=1, max_length=255, required=False)
    value = serializers.CharField(min_length=1, max_length=255, required=False)
    sortOrder = serializers.IntegerField(source='sort_order', required=False)

    def validate(self, data):
        return _require_some_field(data)


class AttributeDefinitionInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    key = serializers.CharField(min_length=1, max_length=100)
    type = serializers.ChoiceField(choices=AttributeDataType.choices)
    isRequired = serializers.BooleanField(source='is_required', default=False)
    unitOfMeasure = serializers.CharField(source='unit_of_measure', required=False, max_length=50)
    options = AttributeOptionInputSerializer(many=True, required=False)


class AttributeDefinitionUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255, required=False)
    key = serializers.CharField(min_length=1, max_length=100, required=False)
    type = serializers.ChoiceField(choices=AttributeDataType.choices, required=False)
    isRequired = serializers.BooleanField(source='is_required', required=False)
    unitOfMeasure = serializers.CharField(
        source='unit_of_measure', required=False, allow_null=True, max_length=50,
    )

    def validate(self, data):
        return _require_some_field(data)


class CategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255)
    key = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    unitOfMeasure = serializers.CharField(source='unit_of_measure', required=False, max_length=50)
    parentId = serializers.IntegerField(source='parent_id', required=False, allow_null=True)
    attributes = AttributeDefinitionInputSerializer(many=True, required=False)


class CategoryUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255, required=False)
    key = serializers.CharField(min_length=2, max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    unitOfMeasure = serializers.CharField(
        source='unit_of_measure', required=False, allow_null=True, max_length=50,
    )
    parentId = serializers.IntegerField(source='parent_id', required=False, allow_null=True)

    def validate(self, data):
        return _require_some_field(data)


class CategoryListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    parentId = serializers.IntegerField(required=False)
    includeChildren = serializers.BooleanField(default=False)
    includeAttributes = serializers.BooleanField(default=False)


class CategoryDetailQuerySerializer(serializers.Serializer):
    includeChildren = serializers.BooleanField(default=False)
    includeAttributes = serializers.BooleanField(default=True)


# ---------------------------------------------------------------------------
# Product output
# ---------------------------------------------------------------------------

class ProductVariantOptionSerializer(serializers.ModelSerializer):
    priceDelta = serializers.DecimalField(
        source='price_delta', max_digits=12, decimal_places=2, read_only=True,
    )
    isAvailable = serializers.BooleanField(source='is_available', read_only=True)
    sortOrder = serializers.IntegerField(source='sort_order', read_only=True)

    class Meta:
        model = ProductVariantOption
        fields = ['id', 'name', 'value', 'priceDelta', 'isAvailable', 'sortOrder']
        read_only_fields = fields


class ProductVariantGroupSerializer(serializers.ModelSerializer):
    selectionType = serializers.CharField(source='selection_type', read_only=True)
    isRequired = serializers.BooleanField(source='is_required', read_only=True)
    options = ProductVariantOptionSerializer(many=True, read_only=True)

    class Meta:
        model = ProductVariantGroup
        fields = ['id', 'name', 'key', 'selectionType', 'isRequired', 'options']
        read_only_fields = fields


class AttributeReferenceSerializer(serializers.ModelSerializer):
    categoryId = serializers.IntegerField(source='category_id', read_only=True)
    unitOfMeasure = serializers.CharField(source='unit_of_measure', read_only=True)
    category = CategorySummarySerializer(read_only=True)

    class Meta:
        model = CategoryAttributeDefinition
        fields = ['id', 'categoryId', 'name', 'key', 'type', 'unitOfMeasure', 'category']
        read_only_fields = fields


class ProductAttributeValueSerializer(serializers.ModelSerializer):
    attributeId = serializers.IntegerField(source='attribute_id', read_only=True)
    attribute = AttributeReferenceSerializer(read_only=True)

    class Meta:
        model = ProductAttributeValue
        fields = ['id', 'attributeId', 'value', 'attribute']
        read_only_fields = fields


class ProductCustomAttributeSerializer(serializers.ModelSerializer):
    unitOfMeasure = serializers.CharField(source='unit_of_measure', read_only=True)

    class Meta:
        model = ProductCustomAttribute
        fields = ['id', 'name', 'key', 'type', 'value', 'unitOfMeasure']
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source='is_active', read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'slug', 'price', 'isActive']
        read_only_fields = fields


class ProductBundleItemSerializer(serializers.ModelSerializer):
    itemProductId = serializers.IntegerField(source='item_product_id', read_only=True)
    item = ProductSummarySerializer(source='item_product', read_only=True)

    class Meta:
        model = ProductBundleItem
        fields = ['id', 'itemProductId', 'quantity', 'item']
        read_only_fields = fields


class ProductBundleMembershipSerializer(serializers.ModelSerializer):
    parentProductId = serializers.IntegerField(source='parent_product_id', read_only=True)
    parent = ProductSummarySerializer(source='parent_product', read_only=True)

    class Meta:
        model = ProductBundleItem
        fields = ['id', 'parentProductId', 'quantity', 'parent']
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Product plus the related collections selected by the ``includes`` context."""
    hotelId = serializers.IntegerField(source='hotel_id', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    baseUnit = serializers.CharField(source='base_unit', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    categories = CategorySummarySerializer(many=True, read_only=True)
    variantGroups = ProductVariantGroupSerializer(source='variant_groups', many=True, read_only=True)
    attributeValues = ProductAttributeValueSerializer(source='attribute_values', many=True, read_only=True)
    customAttributes = ProductCustomAttributeSerializer(source='custom_attributes', many=True, read_only=True)
    bundleItems = ProductBundleItemSerializer(source='bundle_items', many=True, read_only=True)
    bundles = ProductBundleMembershipSerializer(many=True, read_only=True)

    include_fields = {
        'categories': ['categories'],
        'variants': ['variantGroups'],
        'attributes': ['attributeValues', 'customAttributes'],
        'bundles': ['bundleItems', 'bundles'],
    }

    class Meta:
        model = Product
        fields = [
            'id', 'hotelId', 'name', 'slug', 'description', 'isActive', 'stock',
            'price', 'images', 'baseUnit', 'createdAt', 'updatedAt',
            'categories', 'variantGroups', 'attributeValues', 'customAttributes',
            'bundleItems', 'bundles',
        ]
        read_only_fields = fields

    def get_fields(self):
        fields = super().get_fields()
        includes = self.context.get('includes', {})
        for flag, names in self.include_fields.items():
            if not includes.get(flag):
                for name in names:
                    fields.pop(name)
        return fields


# ---------------------------------------------------------------------------
# Product input
# ---------------------------------------------------------------------------

class VariantOptionInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    value = serializers.CharField(min_length=1, max_length=255)
    priceDelta = PriceField(source='price_delta', required=False, allow_null=True)
    isAvailable = serializers.BooleanField(source='is_available', default=True)
    sortOrder = serializers.IntegerField(source='sort_order', default=0)


class VariantGroupInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    key = serializers.CharField(min_length=1, max_length=100)
    selectionType = serializers.ChoiceField(
        source='selection_type',
        choices=ProductVariantGroup.SelectionType.choices,
        default=ProductVariantGroup.SelectionType.SINGLE,
    )
    isRequired = serializers.BooleanField(source='is_required', default=False)
    options = VariantOptionInputSerializer(many=True, required=False)


class AttributeValueInputSerializer(serializers.Serializer):
    attributeId = serializers.IntegerField(source='attribute_id')
    value = serializers.JSONField(required=False, allow_null=True, default=None)


class CustomAttributeInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    key = serializers.CharField(min_length=1, max_length=100)
    type = serializers.ChoiceField(choices=AttributeDataType.choices)
    value = serializers.JSONField(required=False, allow_null=True, default=None)
    unitOfMeasure = serializers.CharField(source='unit_of_measure', required=False, max_length=50)

    def validate(self, data):
        if not value_matches_type(data.get('value'), data['type']):
            raise serializers.ValidationError(
                {'value': [f'Value does not match attribute type {data["type"]}.']}
            )
        return data


class BundleItemInputSerializer(serializers.Serializer):
    itemProductId = serializers.IntegerField(source='item_product_id')
    quantity = serializers.IntegerField(min_value=1, default=1)


class ProductCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255)
    slug = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    isActive = serializers.BooleanField(source='is_active', default=True)
    stock = serializers.IntegerField(min_value=0, default=0)
    price = PriceField(min_value=Decimal('0'), required=False)
    images = serializers.ListField(child=UrlOrPathField(max_length=500), required=False)
    baseUnit = serializers.CharField(source='base_unit', required=False, max_length=50)
    categoryIds = serializers.ListField(
        source='category_ids', child=serializers.IntegerField(), required=False,
    )
    variantGroups = VariantGroupInputSerializer(source='variant_groups', many=True, required=False)
    attributeValues = AttributeValueInputSerializer(source='attribute_values', many=True, required=False)
    customAttributes = CustomAttributeInputSerializer(source='custom_attributes', many=True, required=False)
    bundleItems = BundleItemInputSerializer(source='bundle_items', many=True, required=False)

    def validate_categoryIds(self, value):
        _reject_duplicates(value, 'Category ids must be unique.')
        return value

    def validate_attributeValues(self, value):
        _reject_duplicates([item['attribute_id'] for item in value], 'Attribute ids must be unique.')
        return value

    def validate_bundleItems(self, value):
        _reject_duplicates([item['item_product_id'] for item in value], 'Bundle products must be unique.')
        return value


class ProductUpdateSerializer(ProductCreateSerializer):
    name = serializers.CharField(min_length=2, max_length=255, required=False)
    slug = serializers.CharField(min_length=2, max_length=100, required=False)
    isActive = serializers.BooleanField(source='is_active', required=False)
    stock = serializers.IntegerField(min_value=0, required=False)

    def validate(self, data):
        return _require_some_field(data)


class ProductIncludeSerializer(serializers.Serializer):
    includeCategories = serializers.BooleanField(default=False)
    includeVariants = serializers.BooleanField(default=True)
    includeAttributes = serializers.BooleanField(default=True)
    includeBundles = serializers.BooleanField(default=False)

    def to_includes(self):
        data = self.validated_data
        return {
            'categories': data['includeCategories'],
            'variants': data['includeVariants'],
            'attributes': data['includeAttributes'],
            'bundles': data['includeBundles'],
        }


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

class ImageUploadSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=IMAGE_TYPES)
    categoryKey = serializers.CharField(min_length=1, required=False)
    productSlug = serializers.CharField(min_length=1, required=False)

    def validate(self, data):
        if data['type'] == IMAGE_TYPE_CATEGORY and not data.get('categoryKey'):
            raise serializers.ValidationError(
                {'categoryKey': ['categoryKey is required when type is category']}
            )
        if data['type'] == IMAGE_TYPE_PRODUCT and not data.get('productSlug'):
            raise serializers.ValidationError(
                {'productSlug': ['productSlug is required when type is product']}
            )
        return data
