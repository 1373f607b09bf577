from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import Q
from django.utils.translation import gettext as _

from study_hub.universities.models import University

DEFAULT_UNIVERSITIES = (
    ("Massachusetts Institute of Technology", "MIT"),
    ("Stanford University", "STANFORD"),
    ("Harvard University", "HARVARD"),
    ("University of California, Berkeley", "UCB"),
    ("University of California, Los Angeles", "UCLA"),
    ("Carnegie Mellon University", "CMU"),
    ("University of Michigan", "UMICH"),
    ("Georgia Institute of Technology", "GATECH"),
    ("University of Texas at Austin", "UTAUSTIN"),
    ("University of Washington", "UW"),
)


class Command(BaseCommand):
    help = _("Create the default universities; existing ones are skipped")

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        for name, code in DEFAULT_UNIVERSITIES:
            # A match on either name or code counts as already seeded.
            if University.objects.filter(Q(name=name) | Q(code=code)).exists():
                self.stdout.write(f"Skipped (already exists): {name}")
                continue
            University.objects.create(name=name, code=code)
            created += 1
            self.stdout.write(f"Created: {name}")
        self.stdout.write(self.style.SUCCESS(f"Seeded {created} universities"))
