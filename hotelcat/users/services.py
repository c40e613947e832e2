import logging

from django.db import IntegrityError, transaction

from hotelcat.exceptions import AppError, Conflict
from hotels.models import Hotel

from .authentication import issue_access_token
from .models import User

logger = logging.getLogger(__name__)


def register_user(email, password, role=User.Role.MANAGER, hotel_slug=None):
    if User.objects.filter(email__iexact=email).exists():
        raise Conflict('Email already registered')

    hotel = None
    if role == User.Role.MANAGER:
        if not hotel_slug:
            raise AppError('hotelSlug is required for MANAGER role')
        hotel = Hotel.objects.filter(slug=hotel_slug).first()
        if hotel is None:
            raise AppError('Hotel not found', status_code=404)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email, password=password, role=role, hotel=hotel,
            )
    except IntegrityError:
        raise Conflict('Email already registered')
    logger.info('Registered %s user %s', role, user.pk)
    return user


def login_user(email, password):
    """Returns ``(token, user)`` for valid credentials."""
    user = User.objects.select_related('hotel').filter(email__iexact=email).first()
    if user is None or not user.check_password(password) or not user.is_active:
        logger.warning('Failed login for %s', email)
        raise AppError('Invalid credentials', status_code=401)

    if user.role == User.Role.MANAGER and user.hotel_id is None:
        raise AppError('Assigned hotel missing for manager', status_code=500)

    return issue_access_token(user), user
