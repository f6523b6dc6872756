from datetime import datetime

from registry.exceptions import ValidationError


def parse_date(date_string, field='date'):
    """Parse YYYY-MM-DD (or ISO datetime) into a date; None passes through"""
    if not date_string:
        return None
    try:
        return datetime.fromisoformat(date_string).date()
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field} format. Use YYYY-MM-DD')


def parse_datetime(value, field='date'):
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field} format. Use ISO 8601')


def parse_int(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Field "{field}" must be an integer')


def get_json_body(request):
    """Return the JSON object body or raise ValidationError"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be JSON')
    return data


def require_fields(data, *fields):
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f'Field "{field}" is required')


def check_choice(value, choices, field):
    if value is not None and value not in choices:
        raise ValidationError(f'Field "{field}" must be one of: {", ".join(choices)}')
    return value


def get_string(data, field, required=True, strip=True):
    """Return a string field from a request body, stripped unless strip=False"""
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f'Field "{field}" is required')
        return None
    if not isinstance(value, str):
        raise ValidationError(f'Field "{field}" must be a string')
    if strip:
        value = value.strip()
    if not value:
        if required:
            raise ValidationError(f'Field "{field}" is required')
        return None
    return value
