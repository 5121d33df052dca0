"""
ReviewHub - Marketplace Client Tests

The HTTP layer is mocked; these tests cover request signing, response
normalization and the error cases that trigger the generator fallback.
"""

import base64
import hashlib
import hmac
import json
import pytest
import requests
from decimal import Decimal
from unittest.mock import Mock, patch
from reviewhub.utils.marketplace_client import MarketplaceClient, MarketplaceError, MarketplaceItem

API_URL = 'https://api.example.test/paapi5'


def make_client(**overrides):
    params = dict(api_url=API_URL, access_key='AKIATEST', secret_key='secret',
                  partner_tag='reviewhub-20', timeout=5)
    params.update(overrides)
    return MarketplaceClient(**params)


def make_response(status_code=200, body=None):
    resp = Mock()
    resp.status_code = status_code
    resp.text = json.dumps(body) if body is not None else ''
    resp.json.return_value = body
    return resp


def search_body(*items):
    return {'SearchResult': {'Items': list(items)}}


FULL_ITEM = {
    'ASIN': 'B0TEST0002',
    'DetailPageURL': 'https://www.amazon.com/dp/B0TEST0002',
    'ItemInfo': {
        'Title': {'DisplayValue': 'Zen Bluetooth Speaker'},
        'Features': {'DisplayValues': ['Waterproof', '20 hour battery']}
    },
    'Offers': {'Listings': [{'Price': {'Amount': 59.9, 'Currency': 'USD'}}]},
    'CustomerReviews': {'StarRating': {'Value': 4.4}, 'Count': 321},
    'Images': {'Primary': {'Large': {'URL': 'https://images.example.test/zen.jpg'}}}
}


class TestConfiguration:

    def test_is_configured(self):
        assert make_client().is_configured()
        assert make_client(secret_key=None).is_configured() is False
        assert make_client(partner_tag='').is_configured() is False

    def test_from_config(self):
        client = MarketplaceClient.from_config({
            'MARKETPLACE_API_URL': API_URL + '/',
            'MARKETPLACE_ACCESS_KEY': 'AKIATEST',
            'MARKETPLACE_SECRET_KEY': 'secret',
            'MARKETPLACE_PARTNER_TAG': 'reviewhub-20',
            'MARKETPLACE_TIMEOUT': 3
        })
        assert client.api_url == API_URL
        assert client.timeout == 3

    def test_search_without_credentials(self):
        with pytest.raises(MarketplaceError):
            make_client(access_key=None).search_items('speakers')


class TestSearchItems:

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_parses_items(self, mock_post):
        mock_post.return_value = make_response(200, search_body(FULL_ITEM))

        items = make_client().search_items('bluetooth speaker', 'electronics', 3)

        assert items == [MarketplaceItem(
            external_id='B0TEST0002',
            name='Zen Bluetooth Speaker',
            detail_url='https://www.amazon.com/dp/B0TEST0002',
            description='Waterproof\n20 hour battery',
            price=Decimal('59.90'),
            currency='USD',
            rating=4.4,
            review_count=321,
            image_url='https://images.example.test/zen.jpg',
            category='electronics'
        )]

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_request_is_signed(self, mock_post):
        mock_post.return_value = make_response(200, search_body())

        make_client().search_items('speakers', None, 50)

        args, kwargs = mock_post.call_args
        assert args[0] == API_URL + '/searchitems'
        assert kwargs['timeout'] == 5

        body = json.loads(kwargs['data'])
        assert body['Keywords'] == 'speakers'
        assert body['SearchIndex'] == 'All'
        assert body['ItemCount'] == 10
        assert body['PartnerTag'] == 'reviewhub-20'

        headers = kwargs['headers']
        assert headers['X-Access-Key'] == 'AKIATEST'
        expected = base64.b64encode(hmac.new(
            b'secret', f"{headers['X-Timestamp']}.POST./searchitems".encode(), hashlib.sha256
        ).digest()).decode()
        assert headers['X-Signature'] == expected

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_incomplete_items_dropped(self, mock_post):
        no_title = dict(FULL_ITEM, ItemInfo={})
        no_url = dict(FULL_ITEM, DetailPageURL=None)
        minimal = {'ASIN': 'B0MIN', 'DetailPageURL': 'https://www.amazon.com/dp/B0MIN',
                   'ItemInfo': {'Title': {'DisplayValue': 'Minimal'}}}
        mock_post.return_value = make_response(200, search_body(no_title, no_url, minimal))

        items = make_client().search_items('anything')

        assert [item.external_id for item in items] == ['B0MIN']
        assert items[0].price is None
        assert items[0].rating is None
        assert items[0].review_count == 0

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_empty_result(self, mock_post):
        mock_post.return_value = make_response(200, {})
        assert make_client().search_items('nothing') == []


class TestSearchErrors:

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_transport_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError('connection refused')
        with pytest.raises(MarketplaceError, match='request failed'):
            make_client().search_items('speakers')

    @pytest.mark.parametrize('status, message', [
        (401, 'authentication'),
        (403, 'authentication'),
        (429, 'rate limit'),
        (503, 'HTTP 503'),
    ])
    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_http_errors(self, mock_post, status, message):
        mock_post.return_value = make_response(status, {'message': 'nope'})
        with pytest.raises(MarketplaceError, match=message) as exc_info:
            make_client().search_items('speakers')
        assert exc_info.value.status_code == status

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_invalid_json(self, mock_post):
        resp = make_response(200)
        resp.json.side_effect = ValueError('No JSON object could be decoded')
        mock_post.return_value = resp
        with pytest.raises(MarketplaceError, match='invalid JSON'):
            make_client().search_items('speakers')

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_api_error_body(self, mock_post):
        mock_post.return_value = make_response(200, {
            'Errors': [{'Code': 'InvalidParameterValue', 'Message': 'Keywords is empty'}]
        })
        with pytest.raises(MarketplaceError, match='Keywords is empty'):
            make_client().search_items('')

    @pytest.mark.parametrize('body', [
        {'SearchResult': ['oops']},
        {'SearchResult': {'Items': {'ASIN': 'B0X'}}},
        search_body(dict(FULL_ITEM, Offers={'Listings': {'x': 1}})),
        search_body(dict(FULL_ITEM, Offers={'Listings': ['not-a-dict']})),
    ])
    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_malformed_body_raises_marketplace_error(self, mock_post, body):
        mock_post.return_value = make_response(200, body)
        with pytest.raises(MarketplaceError):
            make_client().search_items('speakers')

    @patch('reviewhub.utils.marketplace_client.requests.post')
    def test_malformed_item(self, mock_post):
        broken = dict(FULL_ITEM, CustomerReviews={'Count': 'many'})
        mock_post.return_value = make_response(200, search_body(broken))
        with pytest.raises(MarketplaceError, match='Malformed'):
            make_client().search_items('speakers')
