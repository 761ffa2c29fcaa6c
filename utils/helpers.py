# utils/helpers.py
from datetime import date, datetime


def parse_iso_date(value, default=None):
    """Parse YYYY-MM-DD; returns `default` for an empty value, raises ValueError otherwise."""
    if not value:
        return default
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), '%Y-%m-%d').date()


def format_date(value):
    return value.strftime('%d %b %Y') if value else ''
