from rest_framework import generics, permissions, status
from rest_framework.response import Response

from users.permissions import IsAdmin

from .serializers import (
    HotelCreateSerializer, HotelListQuerySerializer, HotelSerializer, HotelUpdateSerializer,
)
from .services import create_hotel, delete_hotel, get_hotel, list_hotels, update_hotel


class HotelPermissionsMixin:
    """Reads are public on /api/hotels; every write needs an ADMIN."""
    admin_only = False

    def get_permissions(self):
        if not self.admin_only and self.request.method in permissions.SAFE_METHODS:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated(), IsAdmin()]


class HotelListCreate(HotelPermissionsMixin, generics.ListCreateAPIView):
    serializer_class = HotelSerializer

    def get_queryset(self):
        query = HotelListQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        return list_hotels(search=query.validated_data.get('search'))

    def create(self, request, *args, **kwargs):
        serializer = HotelCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        hotel = create_hotel(serializer.validated_data)
        return Response(HotelSerializer(hotel).data, status=status.HTTP_201_CREATED)


class HotelDetail(HotelPermissionsMixin, generics.RetrieveUpdateDestroyAPIView):
    serializer_class = HotelSerializer
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']

    def get_object(self):
        return get_hotel(self.kwargs['pk'])

    def partial_update(self, request, *args, **kwargs):
        serializer = HotelUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        hotel = update_hotel(self.kwargs['pk'], serializer.validated_data)
        return Response(HotelSerializer(hotel).data)

    def destroy(self, request, *args, **kwargs):
        delete_hotel(self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminHotelListCreate(HotelListCreate):
    admin_only = True


class AdminHotelDetail(HotelDetail):
    admin_only = True
