from datetime import date, datetime

# Sheet cells use day/month/year without zero padding, e.g. "5/3/2024".
SHEET_DATE_LAYOUT = "%d/%m/%Y"
DAY_LAYOUT = "%Y-%m-%d"


def parse_sheet_date(value):
    """Parse a D/M/YYYY cell; returns None when the text is not a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value_text = str(value).strip()
    if not value_text:
        return None
    try:
        return datetime.strptime(value_text, SHEET_DATE_LAYOUT).date()
    except ValueError:
        return None


def format_day(value):
    """Render a date or datetime at day granularity; time of day is dropped."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DAY_LAYOUT)


def format_sheet_date(value):
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.day}/{value.month}/{value.year}"
