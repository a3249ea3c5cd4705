# users/management/commands/ensure_admin.py

"""
PATH: users/management/commands/ensure_admin.py

Admin bootstrap.

- Reads AUTO_ADMIN_EMAIL (+ optional AUTO_ADMIN_PASSWORD) from env,
  or --email / --password.
- Idempotent: promotes an existing account to role=admin, or creates one.
- Does NOT print the password.
"""

from __future__ import annotations

import os

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from users.models import Role, User


class Command(BaseCommand):
    help = "Create or promote an admin user from env vars / options (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", type=str, default="")
        parser.add_argument("--password", type=str, default="")

    def handle(self, *args, **options):
        email = (options.get("email") or os.environ.get("AUTO_ADMIN_EMAIL") or "").strip()
        password = (options.get("password") or os.environ.get("AUTO_ADMIN_PASSWORD") or "").strip()

        if not email:
            self.stdout.write(self.style.WARNING("AUTO_ADMIN_EMAIL not set. Skipping."))
            return

        if password and len(password) < 8:
            raise CommandError("Admin password must be at least 8 characters.")

        with transaction.atomic():
            user = User.objects.select_for_update().filter(email__iexact=email).first()

            if user:
                user.role = Role.ADMIN
                user.is_active = True
                user.is_staff = True
                if password:
                    user.set_password(password)
                user.save()
                self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email} (promoted)"))
                return

            User.objects.create_user(
                email=email,
                password=password or None,
                role=Role.ADMIN,
                is_staff=True,
            )
            self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email} (created)"))
