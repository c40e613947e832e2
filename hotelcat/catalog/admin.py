from django.contrib import admin

from .models import (
    Category, CategoryAttributeDefinition, CategoryAttributeOption, Product,
    ProductAttributeValue, ProductBundleItem, ProductCategory, ProductCustomAttribute,
    ProductVariantGroup, ProductVariantOption,
)


class CategoryAttributeDefinitionInline(admin.TabularInline):
    model = CategoryAttributeDefinition
    extra = 0
    fields = ['name', 'key', 'type', 'is_required', 'unit_of_measure']
    show_change_link = True


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'key', 'hotel', 'parent', 'created_at']
    list_filter = ['hotel']
    search_fields = ['name', 'key']
    raw_id_fields = ['parent']
    inlines = [CategoryAttributeDefinitionInline]


class CategoryAttributeOptionInline(admin.TabularInline):
    model = CategoryAttributeOption
    extra = 0
    fields = ['label', 'value', 'sort_order']


@admin.register(CategoryAttributeDefinition)
class CategoryAttributeDefinitionAdmin(admin.ModelAdmin):
    list_display = ['name', 'key', 'type', 'category', 'is_required']
    list_filter = ['type', 'is_required', 'category__hotel']
    search_fields = ['name', 'key', 'category__name']
    inlines = [CategoryAttributeOptionInline]


class ProductCategoryInline(admin.TabularInline):
    model = ProductCategory
    extra = 0
    raw_id_fields = ['category']


class ProductVariantGroupInline(admin.TabularInline):
    model = ProductVariantGroup
    extra = 0
    fields = ['name', 'key', 'selection_type', 'is_required']
    show_change_link = True


class ProductAttributeValueInline(admin.TabularInline):
    model = ProductAttributeValue
    extra = 0
    raw_id_fields = ['attribute']


class ProductCustomAttributeInline(admin.TabularInline):
    model = ProductCustomAttribute
    extra = 0


class ProductBundleItemInline(admin.TabularInline):
    model = ProductBundleItem
    fk_name = 'parent_product'
    extra = 0
    raw_id_fields = ['item_product']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'hotel', 'price', 'stock', 'is_active']
    list_filter = ['is_active', 'hotel']
    search_fields = ['name', 'slug']
    inlines = [
        ProductCategoryInline, ProductVariantGroupInline, ProductAttributeValueInline,
        ProductCustomAttributeInline, ProductBundleItemInline,
    ]


class ProductVariantOptionInline(admin.TabularInline):
    model = ProductVariantOption
    extra = 0


@admin.register(ProductVariantGroup)
class ProductVariantGroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'key', 'product', 'selection_type', 'is_required']
    search_fields = ['name', 'key', 'product__name']
    inlines = [ProductVariantOptionInline]
