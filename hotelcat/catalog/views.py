import logging

from django.conf import settings
from rest_framework import generics, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from hotelcat.exceptions import AppError
from hotels.mixins import HotelAccessMixin, PublicHotelMixin
from users.permissions import IsAdminOrManager

from . import services
from .filters import ProductFilter
from .serializers import (
    AttributeDefinitionInputSerializer, AttributeDefinitionUpdateSerializer,
    AttributeOptionInputSerializer, AttributeOptionUpdateSerializer,
    CategoryAttributeDefinitionSerializer, CategoryAttributeOptionSerializer,
    CategoryCreateSerializer, CategoryDetailQuerySerializer, CategoryListQuerySerializer,
    CategorySerializer, CategoryUpdateSerializer, ImageUploadSerializer,
    ProductCreateSerializer, ProductIncludeSerializer, ProductSerializer,
    ProductUpdateSerializer,
)
from .storage import save_hotel_image
from .validators import validate_image_upload

logger = logging.getLogger(__name__)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer


class CatalogAccessMixin(HotelAccessMixin):
    permission_classes = [IsAuthenticated, IsAdminOrManager]


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class CategoryListCreate(CatalogAccessMixin, generics.ListCreateAPIView):
    serializer_class = CategorySerializer

    def get_query(self):
        if not hasattr(self, '_query'):
            self._query = _validated(
                CategoryListQuerySerializer, self.request.query_params.dict(),
            ).validated_data
        return self._query

    def get_queryset(self):
        query = self.get_query()
        return services.list_categories(
            self.hotel,
            search=query.get('search'),
            parent_id=query.get('parentId'),
            include_attributes=query['includeAttributes'],
            include_children=query['includeChildren'],
        )

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        if self.request.method == 'GET':
            query = self.get_query()
            ctx['include_attributes'] = query['includeAttributes']
            ctx['include_children'] = query['includeChildren']
        else:
            ctx['include_attributes'] = True
        return ctx

    def create(self, request, *args, **kwargs):
        data = _validated(CategoryCreateSerializer, request.data).validated_data
        category = services.create_category(self.hotel, data)
        return Response(
            self.get_serializer(category).data, status=status.HTTP_201_CREATED,
        )


class CategoryDetail(CatalogAccessMixin, generics.RetrieveUpdateDestroyAPIView):
    serializer_class = CategorySerializer
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']

    def get_query(self):
        if not hasattr(self, '_query'):
            self._query = _validated(
                CategoryDetailQuerySerializer, self.request.query_params.dict(),
            ).validated_data
        return self._query

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx['include_parent'] = True
        if self.request.method == 'GET':
            query = self.get_query()
            ctx['include_attributes'] = query['includeAttributes']
            ctx['include_children'] = query['includeChildren']
        else:
            ctx['include_attributes'] = True
        return ctx

    def get_object(self):
        query = self.get_query()
        return services.get_category(
            self.hotel, self.kwargs['pk'],
            include_attributes=query['includeAttributes'],
            include_children=query['includeChildren'],
        )

    def partial_update(self, request, *args, **kwargs):
        data = _validated(CategoryUpdateSerializer, request.data).validated_data
        category = services.update_category(self.hotel, self.kwargs['pk'], data)
        return Response(self.get_serializer(category).data)

    def destroy(self, request, *args, **kwargs):
        services.delete_category(self.hotel, self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)


class CategoryAttributeCreate(CatalogAccessMixin, generics.GenericAPIView):
    serializer_class = CategoryAttributeDefinitionSerializer

    def post(self, request, pk):
        data = _validated(AttributeDefinitionInputSerializer, request.data).validated_data
        attribute = services.create_category_attribute(self.hotel, pk, data)
        return Response(self.get_serializer(attribute).data, status=status.HTTP_201_CREATED)


class CategoryAttributeDetail(CatalogAccessMixin, generics.GenericAPIView):
    serializer_class = CategoryAttributeDefinitionSerializer

    def patch(self, request, pk, attribute_id):
        data = _validated(AttributeDefinitionUpdateSerializer, request.data).validated_data
        attribute = services.update_category_attribute(self.hotel, pk, attribute_id, data)
        return Response(self.get_serializer(attribute).data)

    def delete(self, request, pk, attribute_id):
        services.delete_category_attribute(self.hotel, pk, attribute_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AttributeOptionCreate(CatalogAccessMixin, generics.GenericAPIView):
    serializer_class = CategoryAttributeOptionSerializer

    def post(self, request, pk, attribute_id):
        data = _validated(AttributeOptionInputSerializer, request.data).validated_data
        option = services.create_attribute_option(self.hotel, pk, attribute_id, data)
        return Response(self.get_serializer(option).data, status=status.HTTP_201_CREATED)


class AttributeOptionDetail(CatalogAccessMixin, generics.GenericAPIView):
    serializer_class = CategoryAttributeOptionSerializer

    def patch(self, request, pk, attribute_id, option_id):
        data = _validated(AttributeOptionUpdateSerializer, request.data).validated_data
        option = services.update_attribute_option(self.hotel, pk, attribute_id, option_id, data)
        return Response(self.get_serializer(option).data)

    def delete(self, request, pk, attribute_id, option_id):
        services.delete_attribute_option(self.hotel, pk, attribute_id, option_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductIncludesMixin:
    """``includeCategories``/``includeVariants``/``includeAttributes``/``includeBundles``
    query flags, shared by list, detail and write responses."""

    def get_includes(self):
        if not hasattr(self, '_includes'):
            self._includes = _validated(
                ProductIncludeSerializer, self.request.query_params.dict(),
            ).to_includes()
        return self._includes

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx['includes'] = self.get_includes()
        return ctx


class ProductListCreate(CatalogAccessMixin, ProductIncludesMixin, generics.ListCreateAPIView):
    serializer_class = ProductSerializer
    filterset_class = ProductFilter

    def get_queryset(self):
        return services.products_for_hotel(self.hotel, self.get_includes()).order_by('name', 'id')

    def create(self, request, *args, **kwargs):
        data = _validated(ProductCreateSerializer, request.data).validated_data
        product = services.create_product(self.hotel, data, self.get_includes())
        return Response(self.get_serializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetail(CatalogAccessMixin, ProductIncludesMixin, generics.RetrieveUpdateDestroyAPIView):
    serializer_class = ProductSerializer
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']

    def get_object(self):
        return services.get_product(self.hotel, self.kwargs['pk'], self.get_includes())

    def partial_update(self, request, *args, **kwargs):
        data = _validated(ProductUpdateSerializer, request.data).validated_data
        product = services.update_product(self.hotel, self.kwargs['pk'], data, self.get_includes())
        return Response(self.get_serializer(product).data)

    def destroy(self, request, *args, **kwargs):
        services.delete_product(self.hotel, self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Public catalog (hotel picked by x-hotel-id / ?hotelId=, no auth)
# ---------------------------------------------------------------------------

class PublicCategoryList(PublicHotelMixin, CategoryListCreate):
    http_method_names = ['get', 'head', 'options']


class PublicCategoryDetail(PublicHotelMixin, CategoryDetail):
    http_method_names = ['get', 'head', 'options']


class PublicProductList(PublicHotelMixin, ProductListCreate):
    http_method_names = ['get', 'head', 'options']


class PublicProductDetail(PublicHotelMixin, ProductDetail):
    http_method_names = ['get', 'head', 'options']


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

class ImageUploadView(CatalogAccessMixin, generics.GenericAPIView):
    """Stores one image (multipart ``file``) for the hotel's QR code, a
    category or a product, re-encoded as WebP."""
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        form = ImageUploadSerializer(data=request.data)
        if not form.is_valid():
            raise AppError('Invalid request', details=form.errors)

        upload = request.FILES.get('file')
        if upload is None:
            raise AppError('Image file is required')

        content = validate_image_upload(upload)
        data = form.validated_data
        relative_path, size = save_hotel_image(
            self.hotel, data['type'], content, upload.name,
            category_key=data.get('categoryKey'),
            product_slug=data.get('productSlug'),
        )
        return Response(
            {
                'url': f'{settings.MEDIA_URL}{relative_path}',
                'relativePath': relative_path,
                'format': 'webp',
                'size': size,
            },
            status=status.HTTP_201_CREATED,
        )
