"""
Abstract base models shared by the storefront applications
"""
import uuid
from django.db import models


class BaseModel(models.Model):
    """
    UUID-keyed row with creation/update stamps. Catalog, discount, shipping
    and order records all list newest first, so created_at is indexed.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']
        get_latest_by = 'created_at'

    def __str__(self):
        return f"{self.__class__.__name__} {self.id}"
