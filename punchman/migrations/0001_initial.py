import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Merchant",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("slug", models.SlugField(max_length=100, unique=True, verbose_name="slug")),
                ("address", models.CharField(blank=True, max_length=300, verbose_name="address")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "merchant",
                "verbose_name_plural": "merchants",
                "db_table": "punchman_merchant",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="User",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "external_id",
                    models.CharField(
                        blank=True,
                        help_text="Identity provider subject (Google 'sub')",
                        max_length=255,
                        null=True,
                        unique=True,
                        verbose_name="external id",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "db_table": "punchman_user",
            },
        ),
        migrations.CreateModel(
            name="LoyaltyProgram",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                (
                    "required_punches",
                    models.PositiveIntegerField(
                        help_text="Punches needed to earn the reward",
                        verbose_name="required punches",
                    ),
                ),
                ("reward_description", models.CharField(max_length=300, verbose_name="reward")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "merchant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="loyalty_programs",
                        to="punchman.merchant",
                        verbose_name="merchant",
                    ),
                ),
            ],
            options={
                "verbose_name": "loyalty program",
                "verbose_name_plural": "loyalty programs",
                "db_table": "punchman_loyalty_program",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(required_punches__gte=1),
                        name="punchman_program_required_punches_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MerchantUser",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("login", models.CharField(max_length=150, verbose_name="login")),
                ("password_hash", models.CharField(max_length=255, verbose_name="password hash")),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Admin"), ("staff", "Staff")],
                        default="staff",
                        max_length=20,
                        verbose_name="role",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "merchant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="users",
                        to="punchman.merchant",
                        verbose_name="merchant",
                    ),
                ),
            ],
            options={
                "verbose_name": "merchant user",
                "verbose_name_plural": "merchant users",
                "db_table": "punchman_merchant_user",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("merchant", "login"),
                        name="punchman_unique_merchant_login",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PunchCard",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("current_punches", models.PositiveIntegerField(default=0, verbose_name="current punches")),
                (
                    "rewards_redeemed",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Completed cycles; also the cycle number of new punches",
                        verbose_name="rewards redeemed",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "loyalty_program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="punch_cards",
                        to="punchman.loyaltyprogram",
                        verbose_name="loyalty program",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="punch_cards",
                        to="punchman.user",
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "punch card",
                "verbose_name_plural": "punch cards",
                "db_table": "punchman_punch_card",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "loyalty_program"),
                        name="punchman_unique_card_per_user_program",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Punch",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("cycle", models.PositiveIntegerField(default=0, verbose_name="cycle")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                (
                    "punch_card",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="punches",
                        to="punchman.punchcard",
                        verbose_name="punch card",
                    ),
                ),
            ],
            options={
                "verbose_name": "punch",
                "verbose_name_plural": "punches",
                "db_table": "punchman_punch",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["punch_card", "cycle"], name="punchman_punch_card_cycle_idx"),
                ],
            },
        ),
    ]
