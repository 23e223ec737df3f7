"""
Validation for order submissions.

`clean_order_submission` checks a raw payload (parsed JSON or multipart
form data) and returns the cleaned values together with a list of
field-level errors. Each error carries a stable code so clients can render
it however they like.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import json
import os
import re

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date, parse_datetime

from .catalog import get_material
from .models import Order, OrderItem, PAYMENT_CREDIT, PAYMENT_TYPE_CHOICES, CREDIT_FREQUENCY_CHOICES


POSTAL_CODE_PATTERN = re.compile(r'^\d{5}$')

# field -> minimum length after stripping
TEXT_FIELDS = {
    'requester_name': 3,
    'site_name': 3,
    'street': 3,
    'street_number': 1,
    'neighborhood': 3,
    'city': 1,
    'state': 1,
}

DOCUMENT_FIELDS = ('identity_document', 'proof_of_address')

DOCUMENT_EXTENSIONS = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.webp': 'image/webp',
    '.pdf': 'application/pdf',
}

CENT = Decimal('0.01')

# Largest integer every supported database accepts in a PositiveIntegerField
MAX_QUANTITY = 2147483647


def _decimal_field_max(model, field_name):
    field = model._meta.get_field(field_name)
    return Decimal(10) ** (field.max_digits - field.decimal_places) - Decimal(1).scaleb(-field.decimal_places)


MAX_UNIT_PRICE = _decimal_field_max(OrderItem, 'unit_price')
MAX_TOTAL_AMOUNT = _decimal_field_max(Order, 'total_amount')


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    message: str

    def as_dict(self):
        return {'field': self.field, 'code': self.code, 'message': self.message}


class OrderValidationError(Exception):
    """Raised with the full list of field errors of a rejected submission."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} invalid field(s)")

    def as_list(self):
        return [error.as_dict() for error in self.errors]


def validate_document_file(file):
    """
    Validate a supporting document upload: size limit and JPEG, PNG, WEBP or PDF
    content. Images are opened with Pillow, PDFs must carry the %PDF signature.
    """
    from PIL import Image

    max_size_mb = settings.ORDER_DOCUMENT_MAX_SIZE_MB
    if file.size > max_size_mb * 1024 * 1024:
        raise ValidationError(f'File size cannot exceed {max_size_mb}MB.', code='file_too_large')

    ext = os.path.splitext(file.name)[1].lower()
    expected_type = DOCUMENT_EXTENSIONS.get(ext)
    allowed_types = settings.ORDER_DOCUMENT_CONTENT_TYPES
    if expected_type is None or expected_type not in allowed_types:
        raise ValidationError(
            f'Invalid file type. Allowed: {", ".join(allowed_types)}',
            code='file_type_not_allowed'
        )

    file.seek(0)
    if expected_type == 'application/pdf':
        header = file.read(5)
        file.seek(0)
        if not header.startswith(b'%PDF'):
            raise ValidationError('File is not a valid PDF document.', code='file_type_not_allowed')
        return file

    try:
        img = Image.open(file)
        img.verify()
        if img.format.upper() not in ['JPEG', 'PNG', 'WEBP']:
            raise ValidationError('Invalid image format. Allowed: JPEG, PNG, WEBP', code='file_type_not_allowed')
    except ValidationError:
        raise
    except Exception as e:
        raise ValidationError(f'Invalid image file: {str(e)}', code='file_type_not_allowed')
    finally:
        file.seek(0)

    return file


def _parse_date(value):
    if hasattr(value, 'year') and hasattr(value, 'month'):
        return value.date() if hasattr(value, 'date') else value
    value = str(value).strip()
    try:
        parsed = parse_date(value)
        if parsed is None:
            parsed_dt = parse_datetime(value)
            parsed = parsed_dt.date() if parsed_dt else None
    except ValueError:
        parsed = None
    return parsed


def _parse_decimal(value):
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _to_cents(value):
    """Round to cents, None when the value has too many digits to represent"""
    if value is None:
        return None
    try:
        return value.quantize(CENT)
    except InvalidOperation:
        return None


def _parse_quantity(value):
    number = _parse_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return number


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _clean_items(raw_items, errors):
    if isinstance(raw_items, str):
        try:
            raw_items = json.loads(raw_items)
        except ValueError:
            errors.append(FieldError('items', 'invalid', 'Materials must be a list.'))
            return []

    if not isinstance(raw_items, (list, tuple)) or not raw_items:
        errors.append(FieldError('items', 'items_required', 'At least one material must be added.'))
        return []

    items = []
    for index, raw in enumerate(raw_items):
        prefix = f'items[{index}]'
        if not isinstance(raw, dict):
            errors.append(FieldError(prefix, 'invalid', 'Each material must be an object.'))
            continue

        material = None
        material_id = str(raw.get('material_id') or '').strip()
        if material_id:
            material = get_material(material_id)
            if material is None:
                errors.append(FieldError(f'{prefix}.material_id', 'unknown_material', 'Unknown material.'))

        description = str(raw.get('description') or '').strip()
        if not description and material is not None:
            description = material['name']
        if not description:
            errors.append(FieldError(f'{prefix}.description', 'required', 'A material must be selected.'))

        quantity = None
        if _is_blank(raw.get('quantity')):
            errors.append(FieldError(f'{prefix}.quantity', 'required', 'Quantity is required.'))
        else:
            quantity = _parse_quantity(raw.get('quantity'))
            if quantity is None:
                errors.append(FieldError(f'{prefix}.quantity', 'invalid_number', 'Quantity must be a whole number.'))
            elif quantity < 1:
                errors.append(FieldError(f'{prefix}.quantity', 'min_value', 'Quantity must be at least 1.'))
                quantity = None
            elif quantity > MAX_QUANTITY:
                errors.append(FieldError(
                    f'{prefix}.quantity', 'max_value', f'Quantity cannot exceed {MAX_QUANTITY}.'
                ))
                quantity = None

        unit_price = None
        if _is_blank(raw.get('unit_price')):
            if material is not None:
                unit_price = material['unit_price']
            else:
                errors.append(FieldError(f'{prefix}.unit_price', 'required', 'Unit price is required.'))
        else:
            unit_price = _parse_decimal(raw.get('unit_price'))
            if unit_price is None:
                errors.append(FieldError(f'{prefix}.unit_price', 'invalid_number', 'Unit price must be a number.'))
            elif unit_price < 0:
                errors.append(FieldError(f'{prefix}.unit_price', 'min_value', 'Unit price cannot be negative.'))
                unit_price = None
            else:
                unit_price = _to_cents(unit_price)
                if unit_price is None or unit_price > MAX_UNIT_PRICE:
                    errors.append(FieldError(
                        f'{prefix}.unit_price', 'max_value', f'Unit price cannot exceed {MAX_UNIT_PRICE}.'
                    ))
                    unit_price = None

        if description and quantity is not None and unit_price is not None:
            items.append({
                'position': index,
                'material_id': material_id,
                'description': description,
                'quantity': int(quantity),
                'unit_price': _to_cents(unit_price),
            })

    return items


def clean_order_submission(data, files=None):
    """
    Validate an order submission.

    Args:
        data: mapping of submitted values
        files: mapping of uploaded files (identity_document, proof_of_address)

    Returns:
        (cleaned, errors) where cleaned holds the model-ready values and
        errors is a list of FieldError. cleaned is only complete when errors
        is empty.
    """
    files = files or {}
    errors = []
    cleaned = {}

    for field, min_length in TEXT_FIELDS.items():
        value = str(data.get(field) or '').strip()
        if not value:
            errors.append(FieldError(field, 'required', 'This field is required.'))
        elif len(value) < min_length:
            errors.append(FieldError(
                field, 'min_length', f'Must be at least {min_length} characters long.'
            ))
        cleaned[field] = value

    postal_code = str(data.get('postal_code') or '').strip()
    if not POSTAL_CODE_PATTERN.match(postal_code):
        errors.append(FieldError('postal_code', 'invalid_postal_code', 'Postal code must have 5 digits.'))
    cleaned['postal_code'] = postal_code

    for field in ('delivery_window_start', 'delivery_window_end'):
        raw = data.get(field)
        if _is_blank(raw):
            errors.append(FieldError(field, 'required', 'Delivery date is required.'))
            cleaned[field] = None
            continue
        parsed = _parse_date(raw)
        if parsed is None:
            errors.append(FieldError(field, 'invalid_date', 'Invalid date format.'))
        cleaned[field] = parsed

    start, end = cleaned['delivery_window_start'], cleaned['delivery_window_end']
    if start and end and end < start:
        errors.append(FieldError(
            'delivery_window_end', 'delivery_window_inverted',
            'The latest delivery date cannot be before the earliest delivery date.'
        ))

    payment_type = str(data.get('payment_type') or '').strip()
    if not payment_type:
        errors.append(FieldError('payment_type', 'required', 'A payment type must be selected.'))
    elif payment_type not in dict(PAYMENT_TYPE_CHOICES):
        errors.append(FieldError('payment_type', 'invalid_choice', 'Invalid payment type.'))
    cleaned['payment_type'] = payment_type

    credit_frequency = ''
    if payment_type == PAYMENT_CREDIT:
        credit_frequency = str(data.get('credit_frequency') or '').strip()
        if not credit_frequency:
            errors.append(FieldError(
                'credit_frequency', 'credit_frequency_required', 'A credit frequency must be selected.'
            ))
        elif credit_frequency not in dict(CREDIT_FREQUENCY_CHOICES):
            errors.append(FieldError('credit_frequency', 'invalid_choice', 'Invalid credit frequency.'))
    cleaned['credit_frequency'] = credit_frequency
    cleaned['payment_method'] = str(data.get('payment_method') or '').strip()

    items = _clean_items(data.get('items'), errors)
    cleaned['items'] = items
    total = _to_cents(sum((item['quantity'] * item['unit_price'] for item in items), Decimal('0')))
    cleaned['total_amount'] = total
    if total is None or total > MAX_TOTAL_AMOUNT:
        errors.append(FieldError('total', 'max_value', f'Order total cannot exceed {MAX_TOTAL_AMOUNT}.'))

    submitted_total = data.get('total')
    if not _is_blank(submitted_total) and items and not any(e.field.startswith(('items', 'total')) for e in errors):
        parsed_total = _to_cents(_parse_decimal(submitted_total))
        if parsed_total is None or parsed_total != total:
            errors.append(FieldError(
                'total', 'total_mismatch', f'Total does not match the materials ({total}).'
            ))

    documents = {}
    if payment_type == PAYMENT_CREDIT:
        for field in DOCUMENT_FIELDS:
            upload = files.get(field)
            if upload is None:
                errors.append(FieldError(
                    field, f'{field}_required', 'This document is required for credit orders.'
                ))
                continue
            try:
                validate_document_file(upload)
            except ValidationError as e:
                errors.append(FieldError(field, e.code or 'invalid', e.messages[0]))
                continue
            documents[field] = upload
    cleaned['documents'] = documents

    return cleaned, errors


def validate_order_submission(data, files=None):
    """Return the list of FieldError for a submission, empty when valid."""
    return clean_order_submission(data, files)[1]
