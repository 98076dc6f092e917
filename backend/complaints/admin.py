from django.contrib import admin

from feedback.models import Feedback

from .models import Complaint


class FeedbackInline(admin.StackedInline):
    model = Feedback
    extra = 0
    readonly_fields = ("student", "rating", "comment", "created_at", "updated_at")


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "category", "status",
                    "student", "assigned_to", "created_at")
    list_filter = ("status", "category")
    search_fields = ("title", "description", "location")
    readonly_fields = ("student", "assigned_to", "image_url",
                       "image_public_id", "created_at", "updated_at")
    inlines = [FeedbackInline]
