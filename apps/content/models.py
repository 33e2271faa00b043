"""
Content Models - Editable Storefront Sections
Tables: site_content
"""
from django.db import models
from apps.core.models import BaseModel


class SiteContent(BaseModel):
    """
    Copy and imagery for one fixed storefront section (hero banner,
    featured collection, ...). The content payload is free-form JSON.
    """
    SECTION_HERO = 'hero'
    SECTION_FEATURED_COLLECTION = 'featured_collection'
    SECTION_BRAND_STORY = 'brand_story'
    SECTION_NEWSLETTER = 'newsletter'
    SECTION_CATEGORIES = 'categories'
    SECTION_CHOICES = [
        (SECTION_HERO, 'Hero'),
        (SECTION_FEATURED_COLLECTION, 'Featured Collection'),
        (SECTION_BRAND_STORY, 'Brand Story'),
        (SECTION_NEWSLETTER, 'Newsletter'),
        (SECTION_CATEGORIES, 'Categories'),
    ]

    section = models.CharField(max_length=40, choices=SECTION_CHOICES, unique=True)
    content = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'site_content'
        verbose_name = 'Site Content'
        verbose_name_plural = 'Site Content'
        ordering = ['section']

    def __str__(self):
        return self.section
