from django.urls import path

from . import views

urlpatterns = [
    path('hotels', views.HotelListCreate.as_view(), name='hotel-list'),
    path('hotels/<int:pk>', views.HotelDetail.as_view(), name='hotel-detail'),
    path('admin/hotels', views.AdminHotelListCreate.as_view(), name='admin-hotel-list'),
    path('admin/hotels/<int:pk>', views.AdminHotelDetail.as_view(), name='admin-hotel-detail'),
]
