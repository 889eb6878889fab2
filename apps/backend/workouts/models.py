from django.conf import settings
from django.db import models

from .recurrence import DAY_NAMES
from .schemas import TITLE_MAX_LENGTH

DAY_CHOICES = [(name, name) for name in DAY_NAMES]


class Workout(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="workouts")
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    reps = models.PositiveIntegerField()
    load = models.FloatField(null=True, blank=True)
    day_of_week = models.CharField(max_length=9, choices=DAY_CHOICES, default="Monday")
    notes = models.TextField(blank=True)
    added_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    # Sorted lists of YYYY-MM-DD strings.
    completion_dates = models.JSONField(default=list, blank=True)
    skipped_dates = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["user", "day_of_week"], name="workouts_user_day_idx")]

    def __str__(self):
        return f"{self.title} ({self.day_of_week})"
