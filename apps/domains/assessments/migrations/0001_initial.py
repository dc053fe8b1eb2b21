# PATH: apps/domains/assessments/migrations/0001_initial.py

from django.db import migrations, models
import django.db.models.deletion

import apps.domains.assessments.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("courses", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Quiz",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("time_limit", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "passing_score",
                    models.PositiveSmallIntegerField(default=apps.domains.assessments.models.default_passing_score),
                ),
                (
                    "max_attempts",
                    models.PositiveIntegerField(default=apps.domains.assessments.models.default_max_attempts),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quizzes",
                        to="courses.course",
                    ),
                ),
                (
                    "lesson",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="quizzes",
                        to="courses.lesson",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_quiz",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("time_limit__isnull", True), ("time_limit__gt", 0), _connector="OR"),
                        name="quiz_time_limit_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("passing_score__gte", 0), ("passing_score__lte", 100)),
                        name="quiz_passing_score_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("max_attempts__gte", 1)),
                        name="quiz_max_attempts_min_1",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("text", models.TextField()),
                (
                    "question_type",
                    models.CharField(
                        choices=[
                            ("multiple_choice", "Multiple choice"),
                            ("true_false", "True / False"),
                            ("short_answer", "Short answer"),
                            ("essay", "Essay"),
                        ],
                        default="multiple_choice",
                        max_length=20,
                    ),
                ),
                ("points", models.PositiveIntegerField(default=1)),
                ("order_index", models.PositiveIntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "quiz",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="assessments.quiz",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_question",
                "ordering": ["order_index", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("points__gt", 0)),
                        name="question_points_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Answer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("text", models.CharField(max_length=1000)),
                ("is_correct", models.BooleanField(default=False)),
                ("order_index", models.PositiveIntegerField(default=0)),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="assessments.question",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_answer",
                "ordering": ["order_index", "id"],
            },
        ),
        migrations.CreateModel(
            name="QuizAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.PositiveIntegerField(db_index=True)),
                ("score", models.PositiveIntegerField(default=0)),
                ("max_score", models.PositiveIntegerField(default=0)),
                ("started_at", models.DateTimeField()),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("time_spent", models.PositiveIntegerField(default=0)),
                ("is_passed", models.BooleanField(default=False)),
                (
                    "quiz",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempts",
                        to="assessments.quiz",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_quiz_attempt",
                "ordering": ["-started_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("completed_at__isnull", True)),
                        fields=("quiz", "user_id"),
                        name="uniq_in_progress_attempt_per_user_quiz",
                    ),
                ],
                "indexes": [models.Index(fields=["user_id", "quiz"], name="attempt_user_quiz_idx")],
            },
        ),
        migrations.CreateModel(
            name="AttemptAnswer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("selected_answer_ids", models.JSONField(blank=True, default=list)),
                ("is_correct", models.BooleanField(default=False)),
                ("points_earned", models.PositiveIntegerField(default=0)),
                (
                    "attempt",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="assessments.quizattempt",
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempt_answers",
                        to="assessments.question",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_attempt_answer",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("attempt", "question"),
                        name="uniq_attempt_answer_per_question",
                    ),
                ],
            },
        ),
    ]
