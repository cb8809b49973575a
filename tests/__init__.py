# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_image_assessment, make_issue
"""

from .utils import make_area_assessment, make_image_assessment, make_issue

__all__ = ["make_image_assessment", "make_issue", "make_area_assessment"]
