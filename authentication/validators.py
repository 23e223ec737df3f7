"""Password and account field validators"""
import re

from django.core.exceptions import ValidationError


SPECIAL_CHARACTERS = r"""!@#$%^&*()_+-=[]{};':"\|,.<>/?"""

RFC_PATTERN = re.compile(r'^[A-Z&Ñ]{3,4}\d{6}[A-V1-9][A-Z\d]{2}$')
PHONE_PATTERN = re.compile(r'^\d{10}$')


class CharacterClassValidator:
    """
    Require at least one uppercase letter, one digit and one special symbol.
    """

    def validate(self, password, user=None):
        errors = []
        if not any(char.isupper() for char in password):
            errors.append(ValidationError(
                'Password must contain at least one uppercase letter.',
                code='password_no_upper',
            ))
        if not any(char.isdigit() for char in password):
            errors.append(ValidationError(
                'Password must contain at least one number.',
                code='password_no_digit',
            ))
        if not any(char in SPECIAL_CHARACTERS for char in password):
            errors.append(ValidationError(
                'Password must contain at least one special symbol.',
                code='password_no_symbol',
            ))
        if errors:
            raise ValidationError(errors)

    def get_help_text(self):
        return 'Your password must contain an uppercase letter, a number and a special symbol.'


class RepeatedCharacterValidator:
    """Reject identical consecutive characters such as 'aa' or '11'."""

    def validate(self, password, user=None):
        for first, second in zip(password, password[1:]):
            if first == second:
                raise ValidationError(
                    'Password must not contain identical consecutive characters.',
                    code='password_repeated_characters',
                )

    def get_help_text(self):
        return 'Your password must not contain identical consecutive characters.'


class SequentialCharacterValidator:
    """
    Reject ascending runs of three characters, e.g. 'abc', 'XYZ' or '123'.
    Letters are compared case-insensitively.
    """

    def validate(self, password, user=None):
        lowered = password.lower()
        for i in range(len(lowered) - 2):
            a, b, c = (ord(char) for char in lowered[i:i + 3])
            if b == a + 1 and c == b + 1:
                raise ValidationError(
                    'Password must not contain character sequences (e.g. "abc", "123").',
                    code='password_sequence',
                )

    def get_help_text(self):
        return 'Your password must not contain sequences such as "abc" or "123".'


def validate_rfc(value):
    if not RFC_PATTERN.match(value or ''):
        raise ValidationError('Invalid RFC.', code='invalid_rfc')
    return value


def validate_phone_number(value):
    if not PHONE_PATTERN.match(value or ''):
        raise ValidationError('Phone number must have 10 digits.', code='invalid_phone')
    return value
