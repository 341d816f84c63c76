from django.contrib.auth.models import AbstractUser
from django.db import models


class UserRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    OFFICE_USER = 'office_user', 'Office User'
    CORPORATE = 'corporate', 'Corporate Client'
    MEDICINE = 'medicine', 'Medicine Operator'


class User(AbstractUser):
    """
    Login account for staff and portal users.

    Corporate clients reach their account through ``corporate_account`` and
    medicine operators through ``medicine_profile``; staff roles have neither.
    """

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CORPORATE,
        help_text="Decides which portal and endpoints the user can reach"
    )
    phone = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN or self.is_superuser

    @property
    def is_office_user(self):
        return self.role == UserRole.OFFICE_USER

    @property
    def is_corporate(self):
        return self.role == UserRole.CORPORATE

    @property
    def is_medicine(self):
        return self.role == UserRole.MEDICINE

    @property
    def portal_account(self):
        """Corporate account or medicine profile matching the role, if linked."""
        if self.is_corporate:
            return getattr(self, 'corporate_account', None)
        if self.is_medicine:
            return getattr(self, 'medicine_profile', None)
        return None
