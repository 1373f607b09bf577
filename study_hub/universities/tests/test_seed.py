from io import StringIO

from django.core.management import call_command

from study_hub.universities.management.commands.seed_universities import (
    DEFAULT_UNIVERSITIES,
)
from study_hub.universities.models import University


def test_seed_universities_is_idempotent(db):
    out = StringIO()
    call_command("seed_universities", stdout=out)
    assert University.objects.count() == len(DEFAULT_UNIVERSITIES)
    assert f"Seeded {len(DEFAULT_UNIVERSITIES)} universities" in out.getvalue()

    again = StringIO()
    call_command("seed_universities", stdout=again)
    assert University.objects.count() == len(DEFAULT_UNIVERSITIES)
    assert "Seeded 0 universities" in again.getvalue()
    assert "Skipped (already exists): Harvard University" in again.getvalue()


def test_seed_skips_on_code_match(db):
    University.objects.create(name="MIT (renamed)", code="mit")
    call_command("seed_universities", stdout=StringIO())
    assert University.objects.filter(code="MIT").count() == 1
    assert University.objects.count() == len(DEFAULT_UNIVERSITIES)
