from django.contrib import admin
from .models import Workout


@admin.register(Workout)
class WorkoutAdmin(admin.ModelAdmin):
    list_display = ("title", "user", "day_of_week", "reps", "load", "added_date", "end_date")
    list_filter = ("day_of_week",)
    search_fields = ("title", "user__email")
