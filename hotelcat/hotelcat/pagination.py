import math

from rest_framework import serializers
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class PageQuerySerializer(serializers.Serializer):
    """Validates ``page``/``pageSize`` before a list query runs."""
    page = serializers.IntegerField(min_value=1, required=False)
    pageSize = serializers.IntegerField(min_value=1, required=False)


class StandardPagination(PageNumberPagination):
    """Offset pagination over ?page=N&pageSize=M (default 20, capped at 100).

    Pages past the end come back empty instead of raising 404.
    """
    page_size = 20
    page_size_query_param = 'pageSize'
    max_page_size = 100

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        params = PageQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        self.page_number = params.validated_data.get('page', 1)
        self.page_size_value = min(
            params.validated_data.get('pageSize', self.page_size), self.max_page_size,
        )
        self.total = queryset.count()
        offset = (self.page_number - 1) * self.page_size_value
        return list(queryset[offset:offset + self.page_size_value])

    def get_paginated_response(self, data):
        return Response({
            'items': data,
            'total': self.total,
            'page': self.page_number,
            'pageSize': self.page_size_value,
            'totalPages': math.ceil(self.total / self.page_size_value),
        })
