# products/models/category.py

import re

from django.core.exceptions import ValidationError
from django.db import models

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"\s+")
_SLUG_DASHES = re.compile(r"-+")


def slugify_category_name(name_en: str) -> str:
    """
    Slug derived from the English name:
    lowercase, drop anything outside [a-z0-9 space -], spaces -> '-', collapse dashes.
    """
    value = (name_en or "").lower()
    value = _SLUG_STRIP.sub("", value)
    value = _SLUG_SPACES.sub("-", value.strip())
    value = _SLUG_DASHES.sub("-", value)
    return value.strip("-")


class Category(models.Model):
    """
    Bilingual product category.

    - name mirrors name_en (default-locale name)
    - slug is regenerated from name_en on every save
    """

    name = models.CharField(max_length=255)
    name_en = models.CharField(max_length=255)
    name_id = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    image = models.URLField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name_en"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name_en

    def clean(self):
        if not (self.name_en or "").strip() or not (self.name_id or "").strip():
            raise ValidationError("Name (English and Indonesian) is required")

    def save(self, *args, **kwargs):
        self.name_en = (self.name_en or "").strip()
        self.name_id = (self.name_id or "").strip()
        self.name = self.name_en
        self.slug = slugify_category_name(self.name_en)
        super().save(*args, **kwargs)

    def localized_name(self, locale: str) -> str:
        return self.name_id if locale == "id" else self.name_en
