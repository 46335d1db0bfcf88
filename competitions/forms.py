from datetime import datetime, time

from django import forms
from django.utils import timezone

from .models import Competition


def end_of_day(value: datetime) -> datetime:
    """Move a deadline to 23:59:59 of its local calendar day."""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    day_end = datetime.combine(value.date(), time(23, 59, 59))
    return timezone.make_aware(day_end)


class CompetitionForm(forms.ModelForm):
    """
    Validates competition data for create and update.

    The deadline accepts a date or datetime and is stored as the end of
    that day in the configured time zone.
    """

    deadline = forms.DateTimeField(
        error_messages={"required": "Please specify a deadline"}
    )

    class Meta:
        model = Competition
        fields = (
            "title",
            "short_description",
            "description",
            "category",
            "type",
            "entry_requirements",
            "prize",
            "deadline",
            "image_url",
        )
        error_messages = {
            "title": {"required": "Please enter a title"},
            "short_description": {"required": "Please enter a short description"},
            "description": {"required": "Please enter a description"},
            "category": {"required": "Please select a category"},
            "type": {"required": "Please select a type"},
            "entry_requirements": {"required": "Please specify entry requirements"},
            "prize": {"required": "Please specify the prize"},
            "image_url": {"invalid": "Please enter a valid URL"},
        }

    def clean_deadline(self):
        return end_of_day(self.cleaned_data["deadline"])
