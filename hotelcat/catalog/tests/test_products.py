"""Tests for products: nested writes, wholesale collection replacement,
hotel ownership of referenced rows, list filters and include flags."""
import json
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from catalog import services
from catalog.models import (
    Category, CategoryAttributeDefinition, CategoryAttributeOption, Product,
    ProductAttributeValue, ProductBundleItem, ProductCategory, ProductVariantGroup,
    ProductVariantOption,
)
from hotels.models import Hotel
from users.authentication import issue_access_token
from users.models import User


class ProductSetupMixin:

    @classmethod
    def setUpTestData(cls):
        cls.hotel = Hotel.objects.create(name='Magna Riviera', slug='magna-riviera')
        cls.other_hotel = Hotel.objects.create(name='Costa Azul', slug='costa-azul')
        cls.manager = User.objects.create_user(
            email='manager@example.com', password='secret-pass',
            role=User.Role.MANAGER, hotel=cls.hotel,
        )

        cls.pastas = Category.objects.create(hotel=cls.hotel, name='Pastas', key='pastas')
        cls.postres = Category.objects.create(hotel=cls.hotel, name='Postres', key='postres')
        cls.foreign_category = Category.objects.create(
            hotel=cls.other_hotel, name='Bebidas', key='bebidas',
        )

        cls.salsa = CategoryAttributeDefinition.objects.create(
            category=cls.pastas, name='Salsa', key='salsa', type='TEXT', is_required=True,
        )
        for i, value in enumerate(['blanca', 'filetto'], start=1):
            CategoryAttributeOption.objects.create(
                definition=cls.salsa, label=value.title(), value=value, sort_order=i,
            )
        cls.peso = CategoryAttributeDefinition.objects.create(
            category=cls.pastas, name='Peso', key='peso', type='NUMBER', unit_of_measure='g',
        )
        cls.foreign_attribute = CategoryAttributeDefinition.objects.create(
            category=cls.foreign_category, name='Tamaño', key='tamano', type='TEXT',
        )

    def setUp(self):
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_access_token(self.manager)}')

    def make_product(self, slug, hotel=None, **fields):
        fields.setdefault('name', slug.replace('-', ' ').title())
        return Product.objects.create(hotel=hotel or self.hotel, slug=slug, **fields)


class ProductCreateTest(ProductSetupMixin, TestCase):

    def test_create_full_product(self):
        side = self.make_product('pan-casero', price=Decimal('500.00'))
        resp = self.client.post('/api/admin/products?includeCategories=true&includeBundles=true', {
            'name': 'Ravioles caseros',
            'slug': 'ravioles-caseros',
            'stock': 35,
            'price': '4500',
            'images': ['https://example.com/ravioles.jpg', '/uploads/magna-riviera/products/r.webp'],
            'categoryIds': [self.pastas.id],
            'variantGroups': [{
                'name': 'Tipo de salsa', 'key': 'salsa', 'isRequired': True,
                'options': [
                    {'name': 'Blanca', 'value': 'blanca', 'priceDelta': 600},
                    {'name': 'Filetto', 'value': 'filetto'},
                ],
            }],
            'attributeValues': [
                {'attributeId': self.salsa.id, 'value': 'filetto'},
                {'attributeId': self.peso.id, 'value': 400},
            ],
            'customAttributes': [{
                'name': 'Recalentado', 'key': 'recalentado', 'type': 'NUMBER',
                'value': 8, 'unitOfMeasure': 'minutos',
            }],
            'bundleItems': [{'itemProductId': side.id, 'quantity': 2}],
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['price'], '4500.00')
        self.assertTrue(resp.data['isActive'])
        self.assertEqual([c['key'] for c in resp.data['categories']], ['pastas'])

        group = resp.data['variantGroups'][0]
        self.assertEqual(group['selectionType'], 'SINGLE')
        self.assertEqual(group['options'][0]['priceDelta'], '600.00')
        self.assertIsNone(group['options'][1]['priceDelta'])

        values = {v['attribute']['key']: v['value'] for v in resp.data['attributeValues']}
        self.assertEqual(values, {'salsa': 'filetto', 'peso': 400})
        self.assertEqual(resp.data['customAttributes'][0]['unitOfMeasure'], 'minutos')
        self.assertEqual(resp.data['bundleItems'][0]['item']['slug'], 'pan-casero')
        self.assertEqual(resp.data['bundleItems'][0]['quantity'], 2)

    def test_price_is_rounded_half_up(self):
        resp = self.client.post(
            '/api/admin/products', {'name': 'Agua', 'slug': 'agua', 'price': 12.345}, format='json',
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['price'], '12.35')
        self.assertEqual(Product.objects.get(slug='agua').price, Decimal('12.35'))

    def test_negative_price_rejected(self):
        resp = self.client.post(
            '/api/admin/products', {'name': 'Agua', 'slug': 'agua', 'price': '-1'}, format='json',
        )
        self.assertEqual(resp.status_code, 422)
        self.assertIn('price', resp.data['issues'])

    def test_default_includes(self):
        resp = self.client.post(
            '/api/admin/products', {'name': 'Agua', 'slug': 'agua'}, format='json',
        )
        self.assertIn('variantGroups', resp.data)
        self.assertIn('attributeValues', resp.data)
        self.assertIn('customAttributes', resp.data)
        self.assertNotIn('categories', resp.data)
        self.assertNotIn('bundleItems', resp.data)

    def test_duplicate_slug_conflicts(self):
        self.make_product('agua')
        resp = self.client.post(
            '/api/admin/products', {'name': 'Agua', 'slug': 'agua'}, format='json',
        )
        self.assertEqual(resp.status_code, 409)

    def test_duplicate_category_ids_rejected(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua', 'categoryIds': [self.pastas.id, self.pastas.id],
        }, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertIn('categoryIds', resp.data['issues'])

    def test_foreign_category_rejected_without_writes(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua',
            'categoryIds': [self.pastas.id, self.foreign_category.id],
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['message'], 'Some categories do not belong to this hotel')
        self.assertFalse(Product.objects.filter(slug='agua').exists())

    def test_foreign_attribute_rejected(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua',
            'attributeValues': [{'attributeId': self.foreign_attribute.id, 'value': 'chico'}],
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Product.objects.exists())

    def test_attribute_value_type_mismatch(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua',
            'attributeValues': [{'attributeId': self.peso.id, 'value': 'mucho'}],
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['details'], {'attributeId': self.peso.id})

    def test_attribute_value_outside_options(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua',
            'attributeValues': [{'attributeId': self.salsa.id, 'value': 'pesto'}],
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['details']['options'], ['blanca', 'filetto'])

    def test_null_attribute_value_accepted(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua',
            'attributeValues': [{'attributeId': self.salsa.id, 'value': None}],
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertIsNone(resp.data['attributeValues'][0]['value'])

    def test_custom_attribute_type_mismatch(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua',
            'customAttributes': [{'name': 'Frio', 'key': 'frio', 'type': 'BOOLEAN', 'value': 'si'}],
        }, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertIn('customAttributes', resp.data['issues'])

    def test_foreign_bundle_item_rejected(self):
        foreign = self.make_product('cafe', hotel=self.other_hotel)
        resp = self.client.post('/api/admin/products', {
            'name': 'Combo', 'slug': 'combo',
            'bundleItems': [{'itemProductId': foreign.id}],
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Product.objects.filter(slug='combo').exists())

    def test_image_must_be_url_or_path(self):
        resp = self.client.post('/api/admin/products', {
            'name': 'Agua', 'slug': 'agua', 'images': ['agua.png'],
        }, format='json')
        self.assertEqual(resp.status_code, 422)


class ProductUpdateTest(ProductSetupMixin, TestCase):

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        cls.product = Product.objects.create(
            hotel=cls.hotel, name='Ravioles', slug='ravioles', price=Decimal('4500.00'), stock=10,
        )
        ProductCategory.objects.create(product=cls.product, category=cls.pastas)
        group = ProductVariantGroup.objects.create(product=cls.product, name='Salsa', key='salsa')
        ProductVariantOption.objects.create(group=group, name='Blanca', value='blanca')
        ProductAttributeValue.objects.create(product=cls.product, attribute=cls.salsa, value='blanca')

    def url(self, product=None):
        return f'/api/admin/products/{(product or self.product).id}'

    def test_scalar_update_leaves_collections(self):
        resp = self.client.patch(self.url(), {'stock': 3}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['stock'], 3)
        self.assertEqual(resp.data['price'], '4500.00')
        self.assertEqual(len(resp.data['variantGroups']), 1)
        self.assertEqual(self.product.categories.count(), 1)

    def test_empty_variant_groups_clears_them(self):
        resp = self.client.patch(self.url(), {'variantGroups': []}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['variantGroups'], [])
        self.assertFalse(ProductVariantOption.objects.filter(group__product=self.product).exists())
        # other collections untouched
        self.assertEqual(ProductAttributeValue.objects.filter(product=self.product).count(), 1)

    def test_collections_are_replaced_wholesale(self):
        resp = self.client.patch(self.url(), {
            'categoryIds': [self.postres.id],
            'attributeValues': [{'attributeId': self.peso.id, 'value': 250}],
        }, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(list(self.product.categories.values_list('key', flat=True)), ['postres'])
        values = ProductAttributeValue.objects.filter(product=self.product)
        self.assertEqual([(v.attribute_id, v.value) for v in values], [(self.peso.id, 250)])

    def test_foreign_category_leaves_product_untouched(self):
        resp = self.client.patch(self.url(), {
            'name': 'Ravioles nuevos', 'categoryIds': [self.foreign_category.id],
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.product.refresh_from_db()
        self.assertEqual(self.product.name, 'Ravioles')
        self.assertEqual(list(self.product.categories.values_list('key', flat=True)), ['pastas'])

    def test_self_bundle_rejected(self):
        resp = self.client.patch(
            self.url(), {'bundleItems': [{'itemProductId': self.product.id}]}, format='json',
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['message'], 'A product cannot be bundled with itself')

    def test_bundle_items_replaced(self):
        pan = self.make_product('pan')
        vino = self.make_product('vino')
        ProductBundleItem.objects.create(parent_product=self.product, item_product=pan)
        resp = self.client.patch(
            f'{self.url()}?includeBundles=true',
            {'bundleItems': [{'itemProductId': vino.id, 'quantity': 3}]}, format='json',
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([b['item']['slug'] for b in resp.data['bundleItems']], ['vino'])
        self.assertEqual(resp.data['bundleItems'][0]['quantity'], 3)

        resp = self.client.get(f'/api/admin/products/{vino.id}?includeBundles=true')
        self.assertEqual([b['parent']['slug'] for b in resp.data['bundles']], ['ravioles'])

    def test_slug_conflict(self):
        self.make_product('noquis')
        resp = self.client.patch(self.url(), {'slug': 'noquis'}, format='json')
        self.assertEqual(resp.status_code, 409)

    def test_empty_payload(self):
        resp = self.client.patch(self.url(), {}, format='json')
        self.assertEqual(resp.status_code, 422)

    def test_other_hotel_product_is_not_found(self):
        foreign = self.make_product('cafe', hotel=self.other_hotel)
        resp = self.client.patch(self.url(foreign), {'stock': 1}, format='json')
        self.assertEqual(resp.status_code, 404)
        resp = self.client.delete(self.url(foreign))
        self.assertEqual(resp.status_code, 404)
        self.assertTrue(Product.objects.filter(pk=foreign.pk).exists())

    def test_delete_cascades(self):
        resp = self.client.delete(self.url())
        self.assertEqual(resp.status_code, 204)
        self.assertFalse(ProductVariantGroup.objects.exists())
        self.assertFalse(ProductAttributeValue.objects.exists())
        self.assertTrue(Category.objects.filter(pk=self.pastas.pk).exists())


class ProductListTest(ProductSetupMixin, TestCase):

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        cls.ravioles = Product.objects.create(
            hotel=cls.hotel, name='Ravioles', slug='ravioles', price=Decimal('4500.00'),
            description='Rellenos de ricota',
        )
        cls.noquis = Product.objects.create(
            hotel=cls.hotel, name='Ñoquis', slug='noquis', price=Decimal('3800.00'),
        )
        cls.flan = Product.objects.create(
            hotel=cls.hotel, name='Flan', slug='flan', price=Decimal('1200.00'), is_active=False,
        )
        Product.objects.create(hotel=cls.other_hotel, name='Cafe', slug='cafe')

        ProductCategory.objects.create(product=cls.ravioles, category=cls.pastas)
        ProductCategory.objects.create(product=cls.noquis, category=cls.pastas)
        ProductCategory.objects.create(product=cls.flan, category=cls.postres)

        group = ProductVariantGroup.objects.create(product=cls.ravioles, name='Salsa', key='salsa')
        cls.blanca = ProductVariantOption.objects.create(group=group, name='Blanca', value='blanca')

        ProductAttributeValue.objects.create(product=cls.ravioles, attribute=cls.salsa, value='filetto')
        ProductAttributeValue.objects.create(product=cls.noquis, attribute=cls.salsa, value='blanca')

    def slugs(self, resp):
        return [p['slug'] for p in resp.data['items']]

    def test_list_is_scoped_and_sorted_by_name(self):
        resp = self.client.get('/api/admin/products')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.slugs(resp), ['flan', 'ravioles', 'noquis'])

    def test_search(self):
        resp = self.client.get('/api/admin/products', {'search': 'ricota'})
        self.assertEqual(self.slugs(resp), ['ravioles'])

    def test_category_filter(self):
        resp = self.client.get('/api/admin/products', {'categoryIds': f'{self.postres.id}'})
        self.assertEqual(self.slugs(resp), ['flan'])
        resp = self.client.get(
            '/api/admin/products', {'categoryIds': f'{self.pastas.id},{self.postres.id}'},
        )
        self.assertEqual(resp.data['total'], 3)

    def test_active_and_price_filters(self):
        resp = self.client.get('/api/admin/products', {'isActive': 'false'})
        self.assertEqual(self.slugs(resp), ['flan'])
        resp = self.client.get('/api/admin/products', {'minPrice': 2000, 'maxPrice': 4000})
        self.assertEqual(self.slugs(resp), ['noquis'])

    def test_negative_price_filter_rejected(self):
        resp = self.client.get('/api/admin/products', {'minPrice': -1})
        self.assertEqual(resp.status_code, 422)

    def test_variant_option_filter(self):
        resp = self.client.get('/api/admin/products', {'variantOptionId': self.blanca.id})
        self.assertEqual(self.slugs(resp), ['ravioles'])

    def test_attribute_filter(self):
        attributes = json.dumps([{'attributeId': self.salsa.id, 'value': 'blanca'}])
        resp = self.client.get('/api/admin/products', {'attributes': attributes})
        self.assertEqual(self.slugs(resp), ['noquis'])

    def test_malformed_attribute_filter_is_ignored(self):
        resp = self.client.get('/api/admin/products', {'attributes': 'not-json'})
        self.assertEqual(resp.data['total'], 3)

    def test_include_flags(self):
        resp = self.client.get('/api/admin/products', {
            'includeVariants': 'false', 'includeAttributes': 'false', 'includeCategories': 'true',
        })
        item = resp.data['items'][0]
        self.assertNotIn('variantGroups', item)
        self.assertNotIn('attributeValues', item)
        self.assertEqual([c['key'] for c in item['categories']], ['postres'])

    def test_public_list(self):
        client = APIClient()
        resp = client.get('/api/public/products', {'hotelId': 'magna-riviera', 'isActive': 'true'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.slugs(resp), ['ravioles', 'noquis'])
        resp = client.get(f'/api/public/products/{self.ravioles.id}', {'hotelId': 'costa-azul'})
        self.assertEqual(resp.status_code, 404)


def _failing_create(product, items):
    raise RuntimeError('storage went away')


class ProductWriteRollbackTest(ProductSetupMixin, TestCase):
    """A failure in any nested write undoes every earlier step of the same request."""

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        cls.product = Product.objects.create(hotel=cls.hotel, name='Ravioles', slug='ravioles')
        group = ProductVariantGroup.objects.create(product=cls.product, name='Salsa', key='salsa')
        ProductVariantOption.objects.create(group=group, name='Blanca', value='blanca')
        cls.pan = Product.objects.create(hotel=cls.hotel, name='Pan', slug='pan')

    def test_update_rolls_back_when_last_collection_fails(self):
        delete_bundles, _ = services.COLLECTIONS['bundle_items']
        failing = {'bundle_items': (delete_bundles, _failing_create)}
        with mock.patch.dict(services.COLLECTIONS, failing):
            with self.assertLogs('hotelcat.exceptions', level='ERROR'):
                resp = self.client.patch(f'/api/admin/products/{self.product.id}', {
                    'name': 'Ravioles nuevos',
                    'variantGroups': [],
                    'bundleItems': [{'itemProductId': self.pan.id}],
                }, format='json')
        self.assertEqual(resp.status_code, 500)

        self.product.refresh_from_db()
        self.assertEqual(self.product.name, 'Ravioles')
        self.assertEqual(self.product.variant_groups.count(), 1)
        self.assertFalse(ProductBundleItem.objects.exists())

    def test_create_rolls_back_when_nested_write_fails(self):
        delete_bundles, _ = services.COLLECTIONS['bundle_items']
        failing = {'bundle_items': (delete_bundles, _failing_create)}
        with mock.patch.dict(services.COLLECTIONS, failing):
            with self.assertLogs('hotelcat.exceptions', level='ERROR'):
                resp = self.client.post('/api/admin/products', {
                    'name': 'Combo', 'slug': 'combo',
                    'categoryIds': [self.pastas.id],
                    'variantGroups': [{'name': 'Salsa', 'key': 'salsa'}],
                    'bundleItems': [{'itemProductId': self.pan.id}],
                }, format='json')
        self.assertEqual(resp.status_code, 500)
        self.assertFalse(Product.objects.filter(slug='combo').exists())
        self.assertFalse(ProductCategory.objects.filter(category=self.pastas).exists())
        self.assertEqual(ProductVariantGroup.objects.count(), 1)
