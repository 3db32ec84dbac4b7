"""
Shared Jinja2 template filters.
"""

from datetime import datetime


def date_filter(value, format_string="%d.%m.%Y"):
    """Format a datetime (or ISO string) for display"""
    if value == "now":
        value = datetime.now()
    if value:
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                return value
        return value.strftime(format_string)
    return ""


def paragraphs(value):
    """Split plain text into paragraphs on blank lines"""
    if not value:
        return []
    return [block.strip() for block in str(value).split("\n\n") if block.strip()]


def register_filters(templates):
    """
    Register custom filters on a Jinja2Templates instance.
    """
    templates.env.filters["date"] = date_filter
    templates.env.filters["paragraphs"] = paragraphs
