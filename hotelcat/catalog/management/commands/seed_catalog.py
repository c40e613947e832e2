from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import (
    AttributeDataType, Category, CategoryAttributeDefinition, CategoryAttributeOption,
    Product, ProductAttributeValue, ProductCategory, ProductCustomAttribute,
    ProductVariantGroup, ProductVariantOption,
)
from hotels.models import Hotel
from users.models import User

HOTEL = {
    'name': 'Magna Riviera',
    'slug': 'magna-riviera',
    'description': 'Hotel boutique con servicio de viandas premium',
    'time_zone': 'America/Argentina/Buenos_Aires',
    'img_qr': 'https://example.com/qr/magna-riviera.png',
    'metadata': {
        'contact': {
            'email': 'contacto@magna-riviera.com',
            'phone': '+54 11 5555-1234',
        },
        'location': {
            'address': 'Av. del Libertador 1234, Buenos Aires',
            'latitude': -34.6037,
            'longitude': -58.3816,
        },
    },
}

PASTA_ATTRIBUTES = [
    {
        'name': 'Salsa', 'key': 'salsa', 'type': AttributeDataType.TEXT, 'is_required': True,
        'options': [('Blanca', 'blanca'), ('Filetto', 'filetto'), ('4 Quesos', '4quesos')],
    },
    {
        'name': 'Incluye queso', 'key': 'incluyeQueso', 'type': AttributeDataType.BOOLEAN,
        'is_required': False, 'options': [],
    },
    {
        'name': 'Tamaño', 'key': 'tamano', 'type': AttributeDataType.TEXT, 'is_required': False,
        'options': [('Chico', 'chico'), ('Mediano', 'mediano'), ('Grande', 'grande')],
    },
]

SAUCE_VARIANTS = [
    ('Salsa blanca', 'blanca', Decimal('600.00')),
    ('Salsa filetto', 'filetto', Decimal('0.00')),
    ('Salsa cuatro quesos', '4quesos', Decimal('800.00')),
]


class Command(BaseCommand):
    help = 'Create (or refresh) the Magna Riviera demo hotel with sample categories and a product'

    def add_arguments(self, parser):
        parser.add_argument('--admin-email', help='Also create an ADMIN user with this email')
        parser.add_argument('--admin-password', help='Password for --admin-email')

    @transaction.atomic
    def handle(self, *args, **options):
        hotel, _ = Hotel.objects.get_or_create(slug=HOTEL['slug'], defaults=HOTEL)

        viandas = self._ensure_category(
            hotel, 'viandas', 'Viandas', 'Viandas y bandejas listas para servir',
        )
        pastas = self._ensure_category(
            hotel, 'viandas-pastas', 'Pastas', 'Pastas caseras listas para calentar', parent=viandas,
        )

        attributes = {}
        for attr in PASTA_ATTRIBUTES:
            attribute, created = CategoryAttributeDefinition.objects.get_or_create(
                category=pastas, key=attr['key'],
                defaults={'name': attr['name'], 'type': attr['type'], 'is_required': attr['is_required']},
            )
            if created:
                CategoryAttributeOption.objects.bulk_create([
                    CategoryAttributeOption(definition=attribute, label=label, value=value, sort_order=i)
                    for i, (label, value) in enumerate(attr['options'], start=1)
                ])
            attributes[attr['key']] = attribute

        product, created = Product.objects.get_or_create(
            hotel=hotel, slug='ravioles-caseros',
            defaults={
                'name': 'Ravioles caseros',
                'description': 'Ravioles artesanales rellenos de ricota y espinaca',
                'stock': 35,
                'price': Decimal('4500.00'),
                'images': [
                    'https://example.com/images/ravioles-1.jpg',
                    'https://example.com/images/ravioles-2.jpg',
                ],
            },
        )
        if created:
            self._fill_product(product, [viandas, pastas], attributes)

        if options.get('admin_email'):
            self._ensure_admin(options['admin_email'], options.get('admin_password'))

        self.stdout.write(self.style.SUCCESS(
            f'Demo data ready for hotel "{hotel.name}" (categories and product Ravioles).'
        ))

    def _ensure_category(self, hotel, key, name, description, parent=None):
        category, _ = Category.objects.update_or_create(
            hotel=hotel, key=key,
            defaults={'name': name, 'description': description, 'parent': parent},
        )
        return category

    def _fill_product(self, product, categories, attributes):
        ProductCategory.objects.bulk_create([
            ProductCategory(product=product, category=category) for category in categories
        ])
        group = ProductVariantGroup.objects.create(
            product=product, name='Tipo de salsa', key='salsa',
            selection_type=ProductVariantGroup.SelectionType.SINGLE, is_required=True,
        )
        ProductVariantOption.objects.bulk_create([
            ProductVariantOption(group=group, name=name, value=value, price_delta=delta, sort_order=i)
            for i, (name, value, delta) in enumerate(SAUCE_VARIANTS, start=1)
        ])
        ProductAttributeValue.objects.bulk_create([
            ProductAttributeValue(product=product, attribute=attributes['salsa'], value='filetto'),
            ProductAttributeValue(product=product, attribute=attributes['incluyeQueso'], value=True),
            ProductAttributeValue(product=product, attribute=attributes['tamano'], value='mediano'),
        ])
        ProductCustomAttribute.objects.create(
            product=product, name='Tiempo de recalentado', key='tiempoRecalentado',
            type=AttributeDataType.NUMBER, value=8, unit_of_measure='minutos',
        )

    def _ensure_admin(self, email, password):
        if not password:
            self.stdout.write(self.style.WARNING('--admin-password not given, admin user skipped'))
            return
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            User.objects.create_user(email=email, password=password, role=User.Role.ADMIN)
            self.stdout.write(f'Created ADMIN user {email}')
        else:
            self.stdout.write(f'User {email} already exists, left unchanged')
