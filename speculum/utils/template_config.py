"""
Centralized template configuration.
"""

import os

from fastapi.templating import Jinja2Templates

from speculum.utils.template_filters import register_filters

APP_DIR = os.path.dirname(os.path.dirname(__file__))


def get_templates():
    """
    Jinja2 templates instance with filters registered.
    """
    templates = Jinja2Templates(directory=os.path.join(APP_DIR, "templates"))
    register_filters(templates)
    return templates


templates = get_templates()
