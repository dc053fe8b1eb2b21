# apps/domains/enrollment/management/commands/recompute_progress.py
from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from academy.framework.engine import AcademyEngine
from apps.domains.enrollment.models import Enrollment


class Command(BaseCommand):
    """
    lesson 카탈로그 변경 후 enrollment.progress / status 재계산.
    enrollment 1건마다 별도 트랜잭션. Completed -> Active 로 되돌리지는 않는다.

    사용 예)
    python manage.py recompute_progress --course-id 3
    python manage.py recompute_progress --enrollment-id 42
    python manage.py recompute_progress --include-completed
    """

    help = "Recompute enrollment progress from stored lesson progress rows."

    def add_arguments(self, parser):
        parser.add_argument("--course-id", type=int)
        parser.add_argument("--enrollment-id", type=int)
        parser.add_argument("--include-completed", action="store_true")

    def handle(self, *args, **opts):
        course_id = opts.get("course_id")
        enrollment_id = opts.get("enrollment_id")
        include_completed = bool(opts.get("include_completed", False))

        qs = Enrollment.objects.all()
        if enrollment_id:
            qs = qs.filter(id=int(enrollment_id))
        if course_id:
            qs = qs.filter(course_id=int(course_id))
        if not include_completed:
            qs = qs.filter(status=Enrollment.Status.ACTIVE)

        ids = list(qs.order_by("id").values_list("id", flat=True))
        if enrollment_id and not ids:
            raise CommandError(f"Enrollment {enrollment_id} not found (or not ACTIVE)")

        engine = AcademyEngine()
        processed = completed = failed = 0

        for eid in ids:
            result = engine.recompute_progress(eid)
            if not result.ok:
                failed += 1
                self.stderr.write(f"enrollment_id={eid} code={result.code} {result.message}")
                continue

            processed += 1
            if result.value.enrollment_completed_now:
                completed += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Recompute done. processed={processed}, completed_now={completed}, failed={failed}"
            )
        )
