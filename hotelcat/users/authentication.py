import logging

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)


def issue_access_token(user):
    """Signed bearer token carrying the user's id, current role and hotel."""
    token = AccessToken.for_user(user)
    token['role'] = user.role
    token['hotel_id'] = user.hotel_id
    return str(token)


class HotelJWTAuthentication(JWTAuthentication):
    """Bearer-token auth that re-checks the token claims against the live
    user row on every request.

    A role change invalidates previously issued tokens, and a manager token
    stops working once the manager is moved to another hotel.
    """

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is None:
            return None

        user, token = result
        if token.get('role') != user.role:
            logger.warning('Rejected token for user %s: role claim is stale', user.pk)
            raise exceptions.AuthenticationFailed('Invalid token')

        if user.role == user.Role.MANAGER:
            token_hotel_id = token.get('hotel_id')
            if token_hotel_id and user.hotel_id and token_hotel_id != user.hotel_id:
                logger.warning('Rejected token for user %s: hotel claim is stale', user.pk)
                raise exceptions.AuthenticationFailed('Invalid token')
            if user.hotel_id is None:
                raise exceptions.PermissionDenied('Manager has no hotel assigned')

        return user, token
