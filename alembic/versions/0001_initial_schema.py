"""initial schema: students, courses, units, enrollments, unit marks, fees, counters

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("registration_number", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("second_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("next_of_kin_details", sa.JSON(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("requires_password_change", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_profile_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("last_updated_by_admin_id", sa.String(), nullable=True),
        sa.Column("last_updated_by_admin_name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_students_id", "students", ["id"])
    op.create_index("ix_students_registration_number", "students", ["registration_number"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_courses_id", "courses", ["id"])

    op.create_table(
        "units",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("unit_name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.UniqueConstraint("course_id", "unit_name", name="uq_units_course_name"),
    )
    op.create_index("ix_units_id", "units", ["id"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("enrollment_date", sa.DateTime(), nullable=False),
        sa.Column("average_unit_marks", sa.Float(), nullable=True),
        sa.Column("main_exam_theory_marks", sa.Integer(), nullable=True),
        sa.Column("main_exam_practical_marks", sa.Integer(), nullable=True),
        sa.Column("final_grade", sa.String(), nullable=True),
        sa.Column("certificate_issued_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("student_id", "course_id", name="uq_enrollments_student_course"),
        sa.CheckConstraint(
            "main_exam_theory_marks IS NULL OR (main_exam_theory_marks BETWEEN 0 AND 100)",
            name="ck_enrollments_theory_range",
        ),
        sa.CheckConstraint(
            "main_exam_practical_marks IS NULL OR (main_exam_practical_marks BETWEEN 0 AND 100)",
            name="ck_enrollments_practical_range",
        ),
        sa.CheckConstraint(
            "final_grade IS NULL OR final_grade IN ('Pass','Fail')",
            name="ck_enrollments_final_grade",
        ),
        sa.CheckConstraint(
            "final_grade IS NULL OR ("
            "average_unit_marks IS NOT NULL "
            "AND main_exam_theory_marks IS NOT NULL "
            "AND main_exam_practical_marks IS NOT NULL)",
            name="ck_enrollments_grade_inputs_present",
        ),
    )
    op.create_index("ix_enrollments_id", "enrollments", ["id"])
    op.create_index("ix_enrollments_student", "enrollments", ["student_id"])

    op.create_table(
        "student_unit_marks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("enrollment_id", sa.Integer(), sa.ForeignKey("enrollments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("units.id", ondelete="CASCADE"), nullable=False),
        sa.Column("marks", sa.Integer(), nullable=True),
        sa.Column("logged_by_admin_id", sa.String(), nullable=True),
        sa.Column("logged_by_admin_name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("enrollment_id", "unit_id", name="uq_student_unit_marks_enrollment_unit"),
        sa.CheckConstraint("marks IS NULL OR (marks BETWEEN 0 AND 100)", name="ck_student_unit_marks_range"),
    )
    op.create_index("ix_student_unit_marks_id", "student_unit_marks", ["id"])
    op.create_index("ix_student_unit_marks_enrollment", "student_unit_marks", ["enrollment_id"])

    op.create_table(
        "fees",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("amount_paid", sa.Float(), nullable=False, server_default="0"),
        sa.Column("payment_date", sa.DateTime(), nullable=True),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("logged_by_admin_id", sa.String(), nullable=True),
        sa.Column("logged_by_admin_name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_fees_id", "fees", ["id"])
    op.create_index("ix_fees_student", "fees", ["student_id"])

    op.create_table(
        "app_counters",
        sa.Column("counter_name", sa.String(), primary_key=True),
        sa.Column("current_value", sa.Integer(), nullable=False, server_default="0"),
    )
    op.bulk_insert(
        sa.table(
            "app_counters",
            sa.column("counter_name", sa.String()),
            sa.column("current_value", sa.Integer()),
        ),
        [{"counter_name": "student_reg_suffix", "current_value": 0}],
    )


def downgrade() -> None:
    op.drop_table("app_counters")
    op.drop_index("ix_fees_student", table_name="fees")
    op.drop_index("ix_fees_id", table_name="fees")
    op.drop_table("fees")
    op.drop_index("ix_student_unit_marks_enrollment", table_name="student_unit_marks")
    op.drop_index("ix_student_unit_marks_id", table_name="student_unit_marks")
    op.drop_table("student_unit_marks")
    op.drop_index("ix_enrollments_student", table_name="enrollments")
    op.drop_index("ix_enrollments_id", table_name="enrollments")
    op.drop_table("enrollments")
    op.drop_index("ix_units_id", table_name="units")
    op.drop_table("units")
    op.drop_index("ix_courses_id", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_students_registration_number", table_name="students")
    op.drop_index("ix_students_id", table_name="students")
    op.drop_table("students")
