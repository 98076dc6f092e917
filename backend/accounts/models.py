"""
Accounts app models.

Defines the fixed role set and a custom User model that extends Django's
``AbstractUser``.  Users log in with their (unique) email; the role is
chosen at registration and never changes afterwards.  Workers additionally
carry a service category (plumbing, electrical, …).
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.db.models import Q

from core.domain.exceptions import DomainError


class Role(models.TextChoices):
    """The four institutional roles."""

    STUDENT = "STUDENT", "Student"
    WORKER = "WORKER", "Worker"
    WARDEN = "WARDEN", "Warden"
    STAFF = "STAFF", "Staff"


class UserManager(BaseUserManager):
    """Manager for the email-keyed ``User`` model."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The email address must be set.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", Role.STAFF)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Custom user model for the complaint tracker.

    * ``email`` is the login identifier and is unique.
    * ``role`` is immutable once the user exists.
    * ``category`` is required for workers and cleared for everyone else.
    * ``refresh_token`` holds the single refresh token currently honoured
      for this user; clearing it revokes the session.
    """

    username = None
    first_name = None
    last_name = None

    name = models.CharField(
        max_length=150,
        verbose_name="Full Name",
    )
    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.STUDENT,
        verbose_name="Role",
        db_index=True,
    )
    category = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        verbose_name="Service Category",
        help_text="Required for workers (e.g. Plumbing, Electrical).",
    )
    refresh_token = models.TextField(
        null=True,
        blank=True,
        verbose_name="Refresh Token",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        constraints = [
            models.CheckConstraint(
                condition=~Q(role=Role.WORKER)
                | (Q(category__isnull=False) & ~Q(category="")),
                name="accounts_user_worker_has_category",
            ),
        ]

    def __str__(self):
        return f"{self.email} ({self.role})"

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    def save(self, *args, **kwargs):
        update_fields = kwargs.get("update_fields")
        if self.pk is not None and (update_fields is None or "role" in update_fields):
            stored_role = (
                type(self).objects.filter(pk=self.pk)
                .values_list("role", flat=True)
                .first()
            )
            if stored_role is not None and stored_role != self.role:
                raise DomainError("A user's role cannot be changed after creation.")
        if self.role != Role.WORKER:
            self.category = None
        super().save(*args, **kwargs)

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT
