import json

import django_filters
from django.db.models import Q

from .models import Product


class NumberInFilter(django_filters.BaseInFilter, django_filters.NumberFilter):
    pass


class ProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    categoryIds = NumberInFilter(field_name='categories__id', lookup_expr='in')
    isActive = django_filters.BooleanFilter(field_name='is_active')
    minPrice = django_filters.NumberFilter(field_name='price', lookup_expr='gte', min_value=0)
    maxPrice = django_filters.NumberFilter(field_name='price', lookup_expr='lte', min_value=0)
    variantOptionId = django_filters.NumberFilter(field_name='variant_groups__options__id')
    # JSON array of {"attributeId": ..., "value": ...}; every entry has to match
    attributes = django_filters.CharFilter(method='filter_attributes')

    class Meta:
        model = Product
        fields = ['search', 'categoryIds', 'isActive', 'minPrice', 'maxPrice', 'variantOptionId', 'attributes']

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value) | Q(slug__icontains=value) | Q(description__icontains=value)
        )

    def filter_attributes(self, queryset, name, value):
        try:
            entries = json.loads(value)
        except ValueError:
            return queryset
        if not isinstance(entries, list):
            return queryset

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            try:
                attribute_id = int(entry.get('attributeId'))
            except (TypeError, ValueError):
                continue
            expected = entry.get('value')
            if expected is None:
                match = {'attribute_values__value__isnull': True}
            else:
                match = {'attribute_values__value': expected}
            # one .filter() per entry so each entry may match a different value row
            queryset = queryset.filter(attribute_values__attribute_id=attribute_id, **match)
        return queryset

    def filter_queryset(self, queryset):
        return super().filter_queryset(queryset).distinct()
