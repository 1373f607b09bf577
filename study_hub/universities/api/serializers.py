from rest_framework import serializers

from study_hub.universities.models import University


class UniversitySerializer(serializers.ModelSerializer[University]):
    class Meta:
        model = University
        fields = ["id", "name", "code"]
        read_only_fields = fields
