from django.urls import path

from . import views

urlpatterns = [
    # Admin catalog (ADMIN picks the hotel per request, MANAGER is pinned to theirs)
    path('admin/categories', views.CategoryListCreate.as_view(), name='admin-category-list'),
    path('admin/categories/<int:pk>', views.CategoryDetail.as_view(), name='admin-category-detail'),
    path(
        'admin/categories/<int:pk>/attributes',
        views.CategoryAttributeCreate.as_view(), name='admin-category-attribute-list',
    ),
    path(
        'admin/categories/<int:pk>/attributes/<int:attribute_id>',
        views.CategoryAttributeDetail.as_view(), name='admin-category-attribute-detail',
    ),
    path(
        'admin/categories/<int:pk>/attributes/<int:attribute_id>/options',
        views.AttributeOptionCreate.as_view(), name='admin-attribute-option-list',
    ),
    path(
        'admin/categories/<int:pk>/attributes/<int:attribute_id>/options/<int:option_id>',
        views.AttributeOptionDetail.as_view(), name='admin-attribute-option-detail',
    ),
    path('admin/products', views.ProductListCreate.as_view(), name='admin-product-list'),
    path('admin/products/<int:pk>', views.ProductDetail.as_view(), name='admin-product-detail'),
    path('admin/uploads/images', views.ImageUploadView.as_view(), name='admin-upload-image'),

    # Public catalog
    path('public/categories', views.PublicCategoryList.as_view(), name='public-category-list'),
    path('public/categories/<int:pk>', views.PublicCategoryDetail.as_view(), name='public-category-detail'),
    path('public/products', views.PublicProductList.as_view(), name='public-product-list'),
    path('public/products/<int:pk>', views.PublicProductDetail.as_view(), name='public-product-detail'),
]
