"""
ReviewHub - Public Route Tests

Health check, affiliate redirect with click tracking, API status and
JSON error handling for unknown routes.
"""

from reviewhub.models import db, AnalyticsEvent, Product, SiteConfig


class TestHealth:
    """Test /health"""

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_unknown_route_is_json_404(self, client):
        response = client.get('/does-not-exist')
        assert response.status_code == 404
        assert response.get_json()['error_code'] == 'NOT_FOUND'


class TestStatus:
    """Test /api/status"""

    def test_status_without_marketplace(self, client):
        data = client.get('/api/status').get_json()
        assert data['status'] == 'operational'
        assert data['version'] == '1.0.0'
        assert data['marketplace_configured'] is False

    def test_status_with_marketplace(self, app, client):
        app.config.update(MARKETPLACE_ACCESS_KEY='AKIATEST', MARKETPLACE_SECRET_KEY='secret',
                          MARKETPLACE_PARTNER_TAG='reviewhub-20')
        assert client.get('/api/status').get_json()['marketplace_configured'] is True


class TestAffiliateRedirect:
    """Test /go/<product_id>"""

    def test_redirects_with_tag(self, client, sample_product):
        response = client.get(f'/go/{sample_product.id}')
        assert response.status_code == 302
        assert response.headers['Location'] == 'https://www.amazon.com/dp/B0TEST0001?tag=reviewhub-20'

    def test_click_is_recorded(self, client, sample_product):
        client.get(f'/go/{sample_product.id}', headers={'Referer': 'https://reviewhub.example/best'})

        event = AnalyticsEvent.query.one()
        assert event.event_type == 'click'
        assert event.product_id == sample_product.id
        assert event.path == f'/go/{sample_product.id}'
        assert event.referrer == 'https://reviewhub.example/best'

    def test_site_tag_overrides_environment_tag(self, client, sample_product):
        SiteConfig.set_value('affiliate_tag', 'sitetag-21')
        db.session.commit()

        response = client.get(f'/go/{sample_product.id}')
        assert response.headers['Location'].endswith('?tag=sitetag-21')

    def test_existing_tag_replaced(self, client, db_session):
        product = Product(name='Kettle', affiliate_url='https://www.amazon.com/dp/B0KETTLE?tag=old-20&th=1')
        db.session.add(product)
        db.session.commit()

        location = client.get(f'/go/{product.id}').headers['Location']
        assert location == 'https://www.amazon.com/dp/B0KETTLE?th=1&tag=reviewhub-20'

    def test_unknown_product(self, client, db_session):
        response = client.get('/go/999')
        assert response.status_code == 404
        assert AnalyticsEvent.query.count() == 0

    def test_product_without_link(self, client, db_session):
        product = Product(name='Linkless')
        db.session.add(product)
        db.session.commit()

        response = client.get(f'/go/{product.id}')
        assert response.status_code == 404
        assert response.get_json()['error_code'] == 'NO_AFFILIATE_LINK'
        assert AnalyticsEvent.query.count() == 0
