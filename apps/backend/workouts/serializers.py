from rest_framework import serializers

from .recurrence import instance_state


class WorkoutSerializer(serializers.Serializer):
    """Renders a ``WorkoutDefinition``; input is validated by ``workouts.schemas``."""

    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(read_only=True)
    reps = serializers.IntegerField(read_only=True)
    load = serializers.FloatField(read_only=True, allow_null=True)
    day_of_week = serializers.CharField(read_only=True)
    notes = serializers.CharField(read_only=True, allow_null=True)
    added_date = serializers.DateField(read_only=True)
    end_date = serializers.DateField(read_only=True, allow_null=True)
    completion_dates = serializers.SerializerMethodField()
    skipped_dates = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    def get_completion_dates(self, obj):
        return [day.isoformat() for day in sorted(obj.completion_dates)]

    def get_skipped_dates(self, obj):
        return [day.isoformat() for day in sorted(obj.skipped_dates)]


class WorkoutInstanceSerializer(WorkoutSerializer):
    status = serializers.SerializerMethodField()

    def get_status(self, obj):
        return instance_state(obj, self.context["date"])
