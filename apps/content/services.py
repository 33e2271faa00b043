"""
Storefront section content: public lookup and admin upsert
"""
import logging
from typing import Any, Dict, Optional

from apps.core.exceptions import NotFoundException, ValidationException
from .models import SiteContent

logger = logging.getLogger(__name__)

SECTIONS = [value for value, _ in SiteContent.SECTION_CHOICES]


def _check_section(section: str) -> str:
    if section not in SECTIONS:
        raise ValidationException(
            f"Unknown content section '{section}', expected one of: {', '.join(SECTIONS)}",
            field="section"
        )
    return section


def active_content_map() -> Dict[str, Any]:
    """Content payload of every active section, keyed by section name."""
    return {
        item.section: item.content
        for item in SiteContent.objects.filter(is_active=True)
    }


def get_section(section: str) -> SiteContent:
    content = SiteContent.objects.filter(section=section).first()
    if content is None:
        raise NotFoundException("Content", identifier=section)
    return content


def save_section(section: str, content: Dict[str, Any], is_active: Optional[bool] = None) -> SiteContent:
    """
    Create or replace a section's content. is_active defaults to True when
    the caller leaves it out.
    """
    _check_section(section)
    item, created = SiteContent.objects.update_or_create(
        section=section,
        defaults={
            'content': content,
            'is_active': True if is_active is None else is_active,
        },
    )
    logger.info(f"Site content {'created' if created else 'updated'}: {section}")
    return item
