import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from hotelcat.exceptions import AppError, Conflict

from .models import Hotel

logger = logging.getLogger(__name__)

HOTEL_FIELDS = ('name', 'slug', 'description', 'time_zone', 'img_qr', 'metadata')


def find_hotel(identifier):
    """Look up a hotel by numeric id, then by slug. Returns None when nothing matches."""
    if identifier is None:
        return None
    identifier = str(identifier).strip()
    if not identifier:
        return None
    if identifier.isdigit():
        hotel = Hotel.objects.filter(pk=int(identifier)).first()
        if hotel is not None:
            return hotel
    return Hotel.objects.filter(slug=identifier).first()


def list_hotels(search=None):
    qs = Hotel.objects.all()
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(slug__icontains=search))
    return qs.order_by('-created_at', '-id')


def get_hotel(hotel_id):
    hotel = Hotel.objects.filter(pk=hotel_id).first()
    if hotel is None:
        raise AppError('Hotel not found', status_code=404)
    return hotel


def create_hotel(data):
    try:
        with transaction.atomic():
            hotel = Hotel.objects.create(**{k: v for k, v in data.items() if k in HOTEL_FIELDS})
    except IntegrityError:
        raise Conflict('Hotel slug already exists')
    logger.info('Hotel created: %s (%s)', hotel.slug, hotel.pk)
    return hotel


def update_hotel(hotel_id, data):
    hotel = get_hotel(hotel_id)
    update_fields = []
    for field in HOTEL_FIELDS:
        if field in data:
            setattr(hotel, field, data[field])
            update_fields.append(field)
    try:
        with transaction.atomic():
            hotel.save(update_fields=update_fields + ['updated_at'])
    except IntegrityError:
        raise Conflict('Hotel slug already exists')
    logger.info('Hotel updated: %s fields=%s', hotel.pk, update_fields)
    return hotel


def delete_hotel(hotel_id):
    hotel = get_hotel(hotel_id)
    hotel_pk = hotel.pk
    hotel.delete()
    logger.info('Hotel deleted: %s', hotel_pk)
