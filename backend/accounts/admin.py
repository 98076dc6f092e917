from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "name", "role", "category", "is_active")
    search_fields = ("email", "name")
    list_filter = ("is_active", "is_staff", "role")
    ordering = ("email",)
    readonly_fields = ("role", "last_login", "date_joined")
    filter_horizontal = ("groups", "user_permissions")
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("name", "role", "category")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser",
                                    "groups", "user_permissions")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "name", "role", "category",
                       "password1", "password2"),
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        # Role is chosen once, on the add form.
        if obj is None:
            return ("last_login", "date_joined")
        return self.readonly_fields
