from datetime import date
from decimal import Decimal
from io import BytesIO
import json

import pytest
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from orders.validators import clean_order_submission, validate_document_file, validate_order_submission


def _payload(**overrides):
    data = {
        'requester_name': 'Ana Customer',
        'site_name': 'Torre Norte',
        'street': 'Av. Reforma',
        'street_number': '120',
        'neighborhood': 'Centro',
        'postal_code': '06000',
        'city': 'Mexico City',
        'state': 'CDMX',
        'delivery_window_start': '2024-05-12',
        'delivery_window_end': '2024-05-20',
        'payment_type': 'cash',
        'items': [
            {'description': 'Portland Cement 50kg', 'quantity': 2, 'unit_price': '250'},
            {'description': 'Hydrated Lime 25kg', 'quantity': 1, 'unit_price': '80'},
        ],
    }
    data.update(overrides)
    return data


def _png(name='id.png'):
    buffer = BytesIO()
    Image.new('RGB', (4, 4), 'white').save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


def _pdf(name='address.pdf'):
    return SimpleUploadedFile(name, b'%PDF-1.4\n%test\n', content_type='application/pdf')


def _codes(errors):
    return {(error.field, error.code) for error in errors}


def test_valid_cash_order_is_cleaned():
    cleaned, errors = clean_order_submission(_payload())
    assert errors == []
    assert cleaned['total_amount'] == Decimal('580.00')
    assert cleaned['delivery_window_start'] == date(2024, 5, 12)
    assert cleaned['credit_frequency'] == ''
    assert [item['position'] for item in cleaned['items']] == [0, 1]
    assert cleaned['documents'] == {}


def test_missing_and_short_fields_are_tagged():
    errors = validate_order_submission(_payload(requester_name='', site_name='AB', postal_code='123'))
    assert ('requester_name', 'required') in _codes(errors)
    assert ('site_name', 'min_length') in _codes(errors)
    assert ('postal_code', 'invalid_postal_code') in _codes(errors)


def test_inverted_delivery_window():
    errors = validate_order_submission(_payload(delivery_window_start='2024-05-20', delivery_window_end='2024-05-12'))
    assert _codes(errors) == {('delivery_window_end', 'delivery_window_inverted')}


def test_same_day_window_is_allowed():
    errors = validate_order_submission(_payload(delivery_window_start='2024-05-20', delivery_window_end='2024-05-20'))
    assert errors == []


def test_invalid_date():
    errors = validate_order_submission(_payload(delivery_window_start='20/05/2024'))
    assert ('delivery_window_start', 'invalid_date') in _codes(errors)


def test_empty_items():
    errors = validate_order_submission(_payload(items=[]))
    assert ('items', 'items_required') in _codes(errors)


def test_item_quantity_and_price_rules():
    errors = validate_order_submission(_payload(items=[
        {'description': 'Sand', 'quantity': 0, 'unit_price': '10'},
        {'description': 'Gravel', 'quantity': 1.5, 'unit_price': '10'},
        {'description': 'Brick', 'quantity': 1, 'unit_price': '-1'},
    ]))
    assert _codes(errors) == {
        ('items[0].quantity', 'min_value'),
        ('items[1].quantity', 'invalid_number'),
        ('items[2].unit_price', 'min_value'),
    }


def test_catalog_material_fills_description_and_price():
    cleaned, errors = clean_order_submission(_payload(items=[{'material_id': 'cement-01', 'quantity': 2}]))
    assert errors == []
    assert cleaned['items'][0]['description'] == 'Portland Cement 50kg'
    assert cleaned['items'][0]['unit_price'] == Decimal('250.00')
    assert cleaned['total_amount'] == Decimal('500.00')


def test_unknown_material():
    errors = validate_order_submission(_payload(items=[{'material_id': 'nope', 'quantity': 1, 'unit_price': 5}]))
    assert ('items[0].material_id', 'unknown_material') in _codes(errors)


def test_items_as_json_string():
    cleaned, errors = clean_order_submission(_payload(items=json.dumps(_payload()['items'])))
    assert errors == []
    assert cleaned['total_amount'] == Decimal('580.00')


def test_client_total_must_match():
    assert validate_order_submission(_payload(total='580')) == []
    errors = validate_order_submission(_payload(total='600'))
    assert _codes(errors) == {('total', 'total_mismatch')}


def test_credit_requires_frequency_and_documents():
    errors = validate_order_submission(_payload(payment_type='credit'))
    assert _codes(errors) == {
        ('credit_frequency', 'credit_frequency_required'),
        ('identity_document', 'identity_document_required'),
        ('proof_of_address', 'proof_of_address_required'),
    }


def test_valid_credit_order():
    files = {'identity_document': _png(), 'proof_of_address': _pdf()}
    cleaned, errors = clean_order_submission(_payload(payment_type='credit', credit_frequency='biweekly'), files)
    assert errors == []
    assert set(cleaned['documents']) == {'identity_document', 'proof_of_address'}


def test_unknown_payment_type():
    errors = validate_order_submission(_payload(payment_type='barter'))
    assert ('payment_type', 'invalid_choice') in _codes(errors)


def test_document_too_large(settings):
    settings.ORDER_DOCUMENT_MAX_SIZE_MB = 0
    with pytest.raises(ValidationError) as exc_info:
        validate_document_file(_pdf())
    assert exc_info.value.code == 'file_too_large'


@pytest.mark.parametrize(
    "upload",
    [
        SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain'),
        SimpleUploadedFile('fake.pdf', b'not a pdf', content_type='application/pdf'),
        SimpleUploadedFile('fake.png', b'not an image', content_type='image/png'),
    ],
)
def test_document_type_not_allowed(upload):
    with pytest.raises(ValidationError) as exc_info:
        validate_document_file(upload)
    assert exc_info.value.code == 'file_type_not_allowed'


@pytest.mark.parametrize('item, field', [
    ({'description': 'Sand', 'quantity': 1, 'unit_price': '1e30'}, 'items[0].unit_price'),
    ({'description': 'Sand', 'quantity': 1, 'unit_price': '100000000'}, 'items[0].unit_price'),
    ({'description': 'Sand', 'quantity': '1e30', 'unit_price': '10'}, 'items[0].quantity'),
    ({'description': 'Sand', 'quantity': 2147483648, 'unit_price': '10'}, 'items[0].quantity'),
])
def test_oversized_item_numbers_are_tagged(item, field):
    errors = validate_order_submission(_payload(items=[item]))
    assert _codes(errors) == {(field, 'max_value')}


def test_largest_storable_item_values_are_accepted():
    cleaned, errors = clean_order_submission(_payload(items=[
        {'description': 'Sand', 'quantity': 1, 'unit_price': '99999999.99'},
    ]))
    assert errors == []
    assert cleaned['total_amount'] == Decimal('99999999.99')


def test_order_total_beyond_storage_limit():
    items = [{'description': 'Steel', 'quantity': 2147483647, 'unit_price': '99999999.99'}]
    errors = validate_order_submission(_payload(items=items))
    assert _codes(errors) == {('total', 'max_value')}


@pytest.mark.parametrize('total', ['1e40', 'abc', '580.001e2'])
def test_unusable_client_total_is_a_mismatch(total):
    errors = validate_order_submission(_payload(total=total))
    assert _codes(errors) == {('total', 'total_mismatch')}
