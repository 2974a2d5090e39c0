from django.contrib import admin

from options.models import Option


@admin.register(Option)
class OptionAdmin(admin.ModelAdmin):
    list_display = ("name", "autoload", "version", "updated_at")
    list_filter = ("autoload",)
    search_fields = ("name",)
    ordering = ("name",)
