"""
ReviewHub - Product API Tests

This module covers:
- Public listing with filters and pagination
- Admin create/update/delete behind the JWT gate
- Validation and duplicate handling
"""

import pytest
from reviewhub.models import db, Product


def make_products(count, category='electronics'):
    for i in range(count):
        db.session.add(Product(name=f'Product {i}', category=category,
                               affiliate_url=f'https://www.amazon.com/dp/B00000000{i}'))
    db.session.commit()


class TestListProducts:
    """Test GET /api/products"""

    def test_empty_list(self, client, db_session):
        response = client.get('/api/products')
        assert response.status_code == 200
        data = response.get_json()
        assert data == {'items': [], 'page': 1, 'per_page': 20, 'total': 0, 'has_more': False}

    def test_lists_stored_products(self, client, sample_product):
        data = client.get('/api/products').get_json()
        assert data['total'] == 1
        item = data['items'][0]
        assert item['name'] == 'Acme Noise Cancelling Headphones'
        assert item['price'] == 199.99
        assert item['affiliate_url'] == 'https://www.amazon.com/dp/B0TEST0001'

    def test_category_filter(self, client, db_session):
        make_products(2, 'electronics')
        make_products(3, 'kitchen')

        data = client.get('/api/products?category=kitchen').get_json()
        assert data['total'] == 3
        assert {item['category'] for item in data['items']} == {'kitchen'}

    def test_search_filter(self, client, sample_product):
        make_products(2)
        data = client.get('/api/products?q=headphones').get_json()
        assert data['total'] == 1
        assert data['items'][0]['id'] == sample_product.id

    def test_pagination(self, client, db_session):
        make_products(5)
        data = client.get('/api/products?page=2&per_page=2').get_json()
        assert data['total'] == 5
        assert data['page'] == 2
        assert len(data['items']) == 2
        assert data['has_more'] is True

        last = client.get('/api/products?page=3&per_page=2').get_json()
        assert len(last['items']) == 1
        assert last['has_more'] is False

    def test_per_page_is_capped(self, client, db_session):
        data = client.get('/api/products?per_page=1000').get_json()
        assert data['per_page'] == 100


class TestCreateProduct:
    """Test POST /api/products"""

    payload = {
        'name': 'Stainless Steel French Press',
        'description': 'Double-wall insulated',
        'price': '34.5',
        'currency': 'usd',
        'rating': 4.3,
        'review_count': 88,
        'affiliate_url': 'https://www.amazon.com/dp/B0PRESS001',
        'image_url': 'https://images.example.test/press.jpg',
        'category': 'kitchen'
    }

    def test_requires_token(self, client, db_session):
        response = client.post('/api/products', json=self.payload)
        assert response.status_code == 401
        assert Product.query.count() == 0

    def test_create_then_listed(self, client, auth_headers):
        """A created product is returned by a subsequent list query"""
        response = client.post('/api/products', json=self.payload, headers=auth_headers)
        assert response.status_code == 201
        product = response.get_json()['product']
        assert product['price'] == 34.5
        assert product['currency'] == 'USD'
        assert product['source'] == 'manual'

        listed = client.get('/api/products').get_json()
        assert [item['id'] for item in listed['items']] == [product['id']]

    def test_validation_error(self, client, auth_headers):
        response = client.post('/api/products', json={'price': 10}, headers=auth_headers)
        assert response.status_code == 400
        data = response.get_json()
        assert data['error_code'] == 'VALIDATION_ERROR'
        assert 'name' in data['error']

    @pytest.mark.parametrize('field, value', [
        ('price', -1),
        ('price', 'cheap'),
        ('rating', 7),
        ('affiliate_url', 'ftp://example.com/item'),
        ('currency', 'dollars'),
        ('review_count', -3),
    ])
    def test_invalid_fields(self, client, auth_headers, field, value):
        body = dict(self.payload, **{field: value})
        response = client.post('/api/products', json=body, headers=auth_headers)
        assert response.status_code == 400

    def test_non_object_body(self, client, auth_headers):
        response = client.post('/api/products', json=['not', 'an', 'object'], headers=auth_headers)
        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'INVALID_DATA_TYPE'

    def test_duplicate_external_id(self, client, auth_headers):
        body = dict(self.payload, external_id='B0PRESS001')
        assert client.post('/api/products', json=body, headers=auth_headers).status_code == 201

        response = client.post('/api/products', json=body, headers=auth_headers)
        assert response.status_code == 409
        assert response.get_json()['error_code'] == 'DUPLICATE_PRODUCT'

    def test_patch_not_allowed(self, client, auth_headers):
        response = client.patch('/api/products', json=self.payload, headers=auth_headers)
        assert response.status_code == 405


class TestSingleProduct:
    """Test GET/PUT/DELETE /api/products/<id>"""

    def test_get(self, client, sample_product):
        response = client.get(f'/api/products/{sample_product.id}')
        assert response.status_code == 200
        assert response.get_json()['product']['name'] == sample_product.name

    def test_get_missing(self, client, db_session):
        assert client.get('/api/products/999').status_code == 404

    def test_update(self, client, sample_product, auth_headers):
        response = client.put(f'/api/products/{sample_product.id}',
                              json={'price': 149, 'category': 'audio'},
                              headers=auth_headers)
        assert response.status_code == 200
        product = response.get_json()['product']
        assert product['price'] == 149.0
        assert product['category'] == 'audio'
        assert product['name'] == 'Acme Noise Cancelling Headphones'

    def test_update_requires_fields(self, client, sample_product, auth_headers):
        response = client.put(f'/api/products/{sample_product.id}', json={}, headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize('name', [None, '   '])
    def test_update_cannot_clear_name(self, client, sample_product, auth_headers, name):
        response = client.put(f'/api/products/{sample_product.id}',
                              json={'name': name}, headers=auth_headers)
        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'VALIDATION_ERROR'
        assert db.session.get(Product, sample_product.id).name == 'Acme Noise Cancelling Headphones'

    def test_update_requires_token(self, client, sample_product):
        response = client.put(f'/api/products/{sample_product.id}', json={'price': 1})
        assert response.status_code == 401

    def test_delete(self, client, sample_product, auth_headers):
        product_id = sample_product.id
        response = client.delete(f'/api/products/{product_id}', headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f'/api/products/{product_id}').status_code == 404

    def test_delete_missing(self, client, auth_headers):
        assert client.delete('/api/products/999', headers=auth_headers).status_code == 404
