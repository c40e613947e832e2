from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.permissions import AllowAny

from hotelcat.exceptions import AppError
from users.models import User

from .services import find_hotel

HOTEL_HEADER = 'x-hotel-id'
HOTEL_QUERY_PARAM = 'hotelId'


def get_hotel_identifier(request):
    """Hotel id or slug from the ``x-hotel-id`` header, else ``?hotelId=``."""
    identifier = request.headers.get(HOTEL_HEADER)
    if not identifier:
        identifier = request.query_params.get(HOTEL_QUERY_PARAM)
    return identifier or None


def resolve_public_hotel(request):
    identifier = get_hotel_identifier(request)
    if identifier is None:
        raise AppError(
            'Hotel identifier is required via `x-hotel-id` header or `hotelId` query parameter.',
            status_code=400,
        )
    hotel = find_hotel(identifier)
    if hotel is None:
        raise AppError('Hotel not found', status_code=404)
    return hotel


def resolve_hotel_access(request):
    """Managers are pinned to their own hotel; admins pick one per request."""
    user = request.user
    if not user or not user.is_authenticated:
        raise NotAuthenticated('Unauthorized')

    if user.role == User.Role.MANAGER:
        if user.hotel_id is None:
            raise PermissionDenied('Manager has no hotel assigned')
        return user.hotel

    if user.role == User.Role.ADMIN:
        identifier = get_hotel_identifier(request)
        if identifier is None:
            raise AppError(
                'Hotel identifier is required via x-hotel-id header or hotelId query',
                status_code=400,
            )
        hotel = find_hotel(identifier)
        if hotel is None:
            raise AppError('Hotel not found', status_code=404)
        return hotel

    raise PermissionDenied('Forbidden')


class HotelScopedMixin:
    """Resolves the acting hotel once auth and permission checks have passed.

    Subclasses pick the policy through ``resolve_hotel``. The hotel is
    available as ``self.hotel`` and in the serializer context.
    """

    def resolve_hotel(self, request):
        raise NotImplementedError

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.hotel = self.resolve_hotel(request)

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx['hotel'] = getattr(self, 'hotel', None)
        return ctx


class HotelAccessMixin(HotelScopedMixin):

    def resolve_hotel(self, request):
        return resolve_hotel_access(request)


class PublicHotelMixin(HotelScopedMixin):
    authentication_classes = []
    permission_classes = [AllowAny]

    def resolve_hotel(self, request):
        return resolve_public_hotel(request)
