"""Category and product operations, always scoped to the acting hotel.

Every function takes the resolved hotel first and re-checks that each
referenced row belongs to it before writing. Violations raise
``NotFoundForHotel`` (the row is invisible from this hotel) or ``AppError``
(a referenced id set is not entirely owned by the hotel).
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import Prefetch, Q

from hotelcat.exceptions import AppError, Conflict, NotFoundForHotel

from .models import (
    Category, CategoryAttributeDefinition, CategoryAttributeOption, Product,
    ProductAttributeValue, ProductBundleItem, ProductCategory, ProductCustomAttribute,
    ProductVariantGroup, ProductVariantOption,
)
from .validators import value_in_options, value_matches_type

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ('name', 'key', 'description', 'unit_of_measure')
ATTRIBUTE_FIELDS = ('name', 'key', 'type', 'is_required', 'unit_of_measure')
OPTION_FIELDS = ('label', 'value', 'sort_order')
PRODUCT_FIELDS = ('name', 'slug', 'description', 'is_active', 'stock', 'price', 'images', 'base_unit')


def _pick(data, fields):
    return {field: data[field] for field in fields if field in data}


# ---------------------------------------------------------------------------
# Ownership checks
# ---------------------------------------------------------------------------

def ensure_category(hotel, category_id):
    category = Category.objects.filter(pk=category_id, hotel=hotel).first()
    if category is None:
        raise NotFoundForHotel('Category not found for this hotel')
    return category


def ensure_attribute(hotel, category_id, attribute_id):
    attribute = CategoryAttributeDefinition.objects.filter(
        pk=attribute_id, category_id=category_id, category__hotel=hotel,
    ).first()
    if attribute is None:
        raise NotFoundForHotel('Attribute not found for this category')
    return attribute


def ensure_option(hotel, category_id, attribute_id, option_id):
    option = CategoryAttributeOption.objects.filter(
        pk=option_id,
        definition_id=attribute_id,
        definition__category_id=category_id,
        definition__category__hotel=hotel,
    ).first()
    if option is None:
        raise NotFoundForHotel('Option not found for this attribute')
    return option


def ensure_product(hotel, product_id):
    product = Product.objects.filter(pk=product_id, hotel=hotel).first()
    if product is None:
        raise NotFoundForHotel('Product not found for this hotel')
    return product


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def category_queryset(include_attributes=False, include_children=False):
    qs = Category.objects.select_related('parent')
    if include_attributes:
        qs = qs.prefetch_related('attributes__options')
    if include_children:
        qs = qs.prefetch_related('children')
        if include_attributes:
            qs = qs.prefetch_related('children__attributes__options')
    return qs


def _create_attribute(category, data):
    attribute = CategoryAttributeDefinition.objects.create(
        category=category, **_pick(data, ATTRIBUTE_FIELDS),
    )
    CategoryAttributeOption.objects.bulk_create([
        CategoryAttributeOption(definition=attribute, **_pick(option, OPTION_FIELDS))
        for option in data.get('options') or []
    ])
    return attribute


def create_category(hotel, data):
    parent = None
    if data.get('parent_id') is not None:
        parent = ensure_category(hotel, data['parent_id'])

    try:
        with transaction.atomic():
            category = Category.objects.create(
                hotel=hotel, parent=parent, **_pick(data, CATEGORY_FIELDS),
            )
            for attribute in data.get('attributes') or []:
                _create_attribute(category, attribute)
    except IntegrityError:
        raise Conflict('Category key or attribute key already exists')

    logger.info('Category created: hotel=%s id=%s key=%s', hotel.pk, category.pk, category.key)
    return get_category(hotel, category.pk, include_attributes=True)


def list_categories(hotel, search=None, parent_id=None, include_attributes=False, include_children=False):
    """Root categories unless ``parent_id`` narrows the list to one parent's children."""
    if parent_id is not None:
        ensure_category(hotel, parent_id)

    qs = category_queryset(include_attributes, include_children).filter(
        hotel=hotel, parent_id=parent_id,
    )
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(key__icontains=search))
    return qs.order_by('-created_at', '-id')


def get_category(hotel, category_id, include_attributes=True, include_children=False):
    category = category_queryset(include_attributes, include_children).filter(
        pk=category_id, hotel=hotel,
    ).first()
    if category is None:
        raise NotFoundForHotel('Category not found for this hotel')
    return category


def _check_not_own_ancestor(category, parent):
    node = parent
    while node is not None:
        if node.pk == category.pk:
            raise AppError('A category cannot be its own ancestor')
        node = node.parent


def update_category(hotel, category_id, data):
    """Partial update. The parent only changes when ``parent_id`` is present."""
    category = ensure_category(hotel, category_id)

    if 'parent_id' in data:
        parent = None
        if data['parent_id'] is not None:
            parent = ensure_category(hotel, data['parent_id'])
            _check_not_own_ancestor(category, parent)
        category.parent = parent

    for field, value in _pick(data, CATEGORY_FIELDS).items():
        setattr(category, field, value)

    try:
        with transaction.atomic():
            category.save()
    except IntegrityError:
        raise Conflict('Category key already exists for this hotel')

    logger.info('Category updated: hotel=%s id=%s', hotel.pk, category.pk)
    return get_category(hotel, category.pk, include_attributes=True)


def delete_category(hotel, category_id):
    category = ensure_category(hotel, category_id)
    category.delete()
    logger.info('Category deleted: hotel=%s id=%s', hotel.pk, category_id)


def create_category_attribute(hotel, category_id, data):
    category = ensure_category(hotel, category_id)
    try:
        with transaction.atomic():
            attribute = _create_attribute(category, data)
    except IntegrityError:
        raise Conflict('Attribute key already exists for this category')
    logger.info('Attribute created: category=%s id=%s key=%s', category.pk, attribute.pk, attribute.key)
    return CategoryAttributeDefinition.objects.prefetch_related('options').get(pk=attribute.pk)


def update_category_attribute(hotel, category_id, attribute_id, data):
    attribute = ensure_attribute(hotel, category_id, attribute_id)
    for field, value in _pick(data, ATTRIBUTE_FIELDS).items():
        setattr(attribute, field, value)
    try:
        with transaction.atomic():
            attribute.save()
    except IntegrityError:
        raise Conflict('Attribute key already exists for this category')
    logger.info('Attribute updated: category=%s id=%s', category_id, attribute.pk)
    return CategoryAttributeDefinition.objects.prefetch_related('options').get(pk=attribute.pk)


def delete_category_attribute(hotel, category_id, attribute_id):
    attribute = ensure_attribute(hotel, category_id, attribute_id)
    attribute.delete()
    logger.info('Attribute deleted: category=%s id=%s', category_id, attribute_id)


def create_attribute_option(hotel, category_id, attribute_id, data):
    attribute = ensure_attribute(hotel, category_id, attribute_id)
    option = CategoryAttributeOption.objects.create(definition=attribute, **_pick(data, OPTION_FIELDS))
    logger.info('Option created: attribute=%s id=%s value=%s', attribute.pk, option.pk, option.value)
    return option


def update_attribute_option(hotel, category_id, attribute_id, option_id, data):
    option = ensure_option(hotel, category_id, attribute_id, option_id)
    for field, value in _pick(data, OPTION_FIELDS).items():
        setattr(option, field, value)
    option.save()
    logger.info('Option updated: attribute=%s id=%s', attribute_id, option.pk)
    return option


def delete_attribute_option(hotel, category_id, attribute_id, option_id):
    option = ensure_option(hotel, category_id, attribute_id, option_id)
    option.delete()
    logger.info('Option deleted: attribute=%s id=%s', attribute_id, option_id)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def product_queryset(includes=None):
    includes = includes or {}
    qs = Product.objects.all()
    if includes.get('categories'):
        qs = qs.prefetch_related('categories')
    if includes.get('variants'):
        qs = qs.prefetch_related('variant_groups__options')
    if includes.get('attributes'):
        qs = qs.prefetch_related(
            Prefetch(
                'attribute_values',
                queryset=ProductAttributeValue.objects.select_related('attribute__category'),
            ),
            'custom_attributes',
        )
    if includes.get('bundles'):
        qs = qs.prefetch_related(
            Prefetch('bundle_items', queryset=ProductBundleItem.objects.select_related('item_product')),
            Prefetch('bundles', queryset=ProductBundleItem.objects.select_related('parent_product')),
        )
    return qs


def products_for_hotel(hotel, includes=None):
    return product_queryset(includes).filter(hotel=hotel)


def get_product(hotel, product_id, includes=None):
    product = products_for_hotel(hotel, includes).filter(pk=product_id).first()
    if product is None:
        raise NotFoundForHotel('Product not found for this hotel')
    return product


def _check_categories(hotel, category_ids):
    if not category_ids:
        return
    owned = Category.objects.filter(pk__in=category_ids, hotel=hotel).count()
    if owned != len(set(category_ids)):
        raise AppError('Some categories do not belong to this hotel')


def _check_attribute_values(hotel, attribute_values):
    """Every definition must belong to the hotel and every value must fit its type."""
    if not attribute_values:
        return
    attribute_ids = {item['attribute_id'] for item in attribute_values}
    definitions = {
        definition.pk: definition
        for definition in CategoryAttributeDefinition.objects.filter(
            pk__in=attribute_ids, category__hotel=hotel,
        ).prefetch_related('options')
    }
    if len(definitions) != len(attribute_ids):
        raise AppError('Some attribute definitions do not belong to this hotel')

    for item in attribute_values:
        definition = definitions[item['attribute_id']]
        value = item.get('value')
        if not value_matches_type(value, definition.type):
            raise AppError(
                f'Value for attribute "{definition.key}" must be of type {definition.type}',
                details={'attributeId': definition.pk},
            )
        option_values = {option.value for option in definition.options.all()}
        if not value_in_options(value, option_values):
            raise AppError(
                f'Value for attribute "{definition.key}" must be one of its options',
                details={'attributeId': definition.pk, 'options': sorted(option_values)},
            )


def _check_bundle_items(hotel, bundle_items, product=None):
    if not bundle_items:
        return
    item_ids = {item['item_product_id'] for item in bundle_items}
    if product is not None and product.pk in item_ids:
        raise AppError('A product cannot be bundled with itself')
    owned = Product.objects.filter(pk__in=item_ids, hotel=hotel).count()
    if owned != len(item_ids):
        raise AppError('Some bundle products do not belong to this hotel')


def _set_categories(product, category_ids):
    ProductCategory.objects.bulk_create([
        ProductCategory(product=product, category_id=category_id) for category_id in category_ids
    ])


def _create_variant_groups(product, variant_groups):
    for group_data in variant_groups:
        group = ProductVariantGroup.objects.create(
            product=product,
            name=group_data['name'],
            key=group_data['key'],
            selection_type=group_data['selection_type'],
            is_required=group_data['is_required'],
        )
        ProductVariantOption.objects.bulk_create([
            ProductVariantOption(
                group=group,
                name=option['name'],
                value=option['value'],
                price_delta=option.get('price_delta'),
                is_available=option['is_available'],
                sort_order=option['sort_order'],
            )
            for option in group_data.get('options') or []
        ])


def _create_attribute_values(product, attribute_values):
    ProductAttributeValue.objects.bulk_create([
        ProductAttributeValue(
            product=product, attribute_id=item['attribute_id'], value=item.get('value'),
        )
        for item in attribute_values
    ])


def _create_custom_attributes(product, custom_attributes):
    ProductCustomAttribute.objects.bulk_create([
        ProductCustomAttribute(
            product=product,
            name=item['name'],
            key=item['key'],
            type=item['type'],
            value=item.get('value'),
            unit_of_measure=item.get('unit_of_measure'),
        )
        for item in custom_attributes
    ])


def _create_bundle_items(product, bundle_items):
    ProductBundleItem.objects.bulk_create([
        ProductBundleItem(
            parent_product=product,
            item_product_id=item['item_product_id'],
            quantity=item['quantity'],
        )
        for item in bundle_items
    ])


# Collection key -> (delete existing rows, create new rows)
COLLECTIONS = {
    'category_ids': (
        lambda product: ProductCategory.objects.filter(product=product).delete(),
        _set_categories,
    ),
    'variant_groups': (
        lambda product: ProductVariantGroup.objects.filter(product=product).delete(),
        _create_variant_groups,
    ),
    'attribute_values': (
        lambda product: ProductAttributeValue.objects.filter(product=product).delete(),
        _create_attribute_values,
    ),
    'custom_attributes': (
        lambda product: ProductCustomAttribute.objects.filter(product=product).delete(),
        _create_custom_attributes,
    ),
    'bundle_items': (
        lambda product: ProductBundleItem.objects.filter(parent_product=product).delete(),
        _create_bundle_items,
    ),
}


def create_product(hotel, data, includes=None):
    _check_categories(hotel, data.get('category_ids'))
    _check_attribute_values(hotel, data.get('attribute_values'))
    _check_bundle_items(hotel, data.get('bundle_items'))

    try:
        with transaction.atomic():
            product = Product.objects.create(hotel=hotel, **_pick(data, PRODUCT_FIELDS))
            for key, (_, create) in COLLECTIONS.items():
                if data.get(key):
                    create(product, data[key])
    except IntegrityError:
        raise Conflict('Product slug already exists for this hotel')

    logger.info('Product created: hotel=%s id=%s slug=%s', hotel.pk, product.pk, product.slug)
    return get_product(hotel, product.pk, includes)


def update_product(hotel, product_id, data, includes=None):
    """Scalars change only when sent. A sent collection replaces the stored one
    wholesale, so an empty list clears it; an omitted collection is untouched."""
    product = ensure_product(hotel, product_id)

    _check_categories(hotel, data.get('category_ids'))
    _check_attribute_values(hotel, data.get('attribute_values'))
    _check_bundle_items(hotel, data.get('bundle_items'), product=product)

    try:
        with transaction.atomic():
            scalars = _pick(data, PRODUCT_FIELDS)
            if scalars:
                for field, value in scalars.items():
                    setattr(product, field, value)
                product.save()
            for key, (delete, create) in COLLECTIONS.items():
                if key in data:
                    delete(product)
                    if data[key]:
                        create(product, data[key])
    except IntegrityError:
        raise Conflict('Product slug already exists for this hotel')

    logger.info('Product updated: hotel=%s id=%s fields=%s', hotel.pk, product.pk, sorted(data))
    return get_product(hotel, product.pk, includes)


def delete_product(hotel, product_id):
    product = ensure_product(hotel, product_id)
    product.delete()
    logger.info('Product deleted: hotel=%s id=%s', hotel.pk, product_id)
