# techmart/settings/__init__.py
"""
PATH: techmart/settings/__init__.py

Settings package entrypoint.

We intentionally do NOT import dev/prod here to avoid accidental environment coupling.
Use DJANGO_SETTINGS_MODULE to select:
- techmart.settings.dev   (local development + tests)
- techmart.settings.prod  (production)
"""
