"""add academic records and front office registers

Revision ID: 9b3e6d2c5a71
Revises: 4f1c2a7b9d10
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '9b3e6d2c5a71'
down_revision: Union[str, Sequence[str], None] = '4f1c2a7b9d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = "('present','absent','late','half_day','holiday')"
AUDIENCES = "('all','students','staff','parents')"

NEW_TABLES = [
    'student_categories', 'school_houses',
    'enquiries', 'complaints', 'phone_calls', 'postal_records',
    'exam_groups', 'exams', 'exam_subjects', 'exam_results',
    'student_attendance', 'staff_attendance',
    'homework', 'homework_submissions',
    'events', 'notices',
]


def _uuid():
    return postgresql.UUID(as_uuid=True)


def _tenant_columns():
    return [
        sa.Column('id', _uuid(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('school_id', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    ]


def _index(table, *columns):
    for column in columns:
        op.create_index(f'ix_{table}_{column}', table, [column])


def upgrade():
    # Student categories and houses replace the free-text category
    for table in ('student_categories', 'school_houses'):
        op.create_table(
            table,
            *_tenant_columns(),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.UniqueConstraint('school_id', 'name', name=f'uq_{table}_school_name')
        )
        _index(table, 'school_id')
    op.add_column('school_houses', sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()))

    op.add_column('students', sa.Column('category_id', _uuid(), nullable=True))
    op.add_column('students', sa.Column('house_id', _uuid(), nullable=True))
    op.create_foreign_key('fk_students_category_id', 'students', 'student_categories', ['category_id'], ['id'], ondelete='RESTRICT')
    op.create_foreign_key('fk_students_house_id', 'students', 'school_houses', ['house_id'], ['id'], ondelete='RESTRICT')
    _index('students', 'category_id', 'house_id')

    # Carry existing category text over as category rows
    op.execute(
        """
        INSERT INTO student_categories (school_id, name)
        SELECT DISTINCT school_id, category FROM students
        WHERE category IS NOT NULL AND category <> ''
        """
    )
    op.execute(
        """
        UPDATE students SET category_id = sc.id
        FROM student_categories sc
        WHERE sc.school_id = students.school_id AND sc.name = students.category
        """
    )
    op.drop_column('students', 'category')

    # Front office registers
    op.create_table(
        'enquiries',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=128), nullable=True),
        sa.Column('source', sa.String(length=64), nullable=True),
        sa.Column('class_interested', sa.String(length=64), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('enquiry_date', sa.Date(), nullable=False),
        sa.Column('follow_up_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('assigned_staff_id', _uuid(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['assigned_staff_id'], ['staff.id'], ondelete='SET NULL'),
        sa.CheckConstraint("status IN ('active','passive','won','lost','closed')", name='ck_enquiries_status')
    )
    _index('enquiries', 'school_id', 'assigned_staff_id')

    op.create_table(
        'complaints',
        *_tenant_columns(),
        sa.Column('complaint_type', sa.String(length=64), nullable=False, server_default='General'),
        sa.Column('source', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('email', sa.String(length=128), nullable=True),
        sa.Column('complaint_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('action_taken', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('assigned_staff_id', _uuid(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['assigned_staff_id'], ['staff.id'], ondelete='SET NULL'),
        sa.CheckConstraint("status IN ('pending','in_progress','resolved','closed')", name='ck_complaints_status')
    )
    _index('complaints', 'school_id', 'assigned_staff_id')

    op.create_table(
        'phone_calls',
        *_tenant_columns(),
        sa.Column('call_type', sa.String(length=16), nullable=False, server_default='incoming'),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('call_date', sa.Date(), nullable=False),
        sa.Column('call_duration', sa.String(length=16), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('next_follow_up', sa.Date(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.CheckConstraint("call_type IN ('incoming','outgoing')", name='ck_phone_calls_type')
    )
    _index('phone_calls', 'school_id')

    op.create_table(
        'postal_records',
        *_tenant_columns(),
        sa.Column('postal_type', sa.String(length=16), nullable=False),
        sa.Column('reference_no', sa.String(length=32), nullable=False),
        sa.Column('from_title', sa.String(length=128), nullable=True),
        sa.Column('to_title', sa.String(length=128), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('postal_date', sa.Date(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'reference_no', name='uq_postal_records_school_reference_no'),
        sa.CheckConstraint("postal_type IN ('dispatch','receive')", name='ck_postal_records_type')
    )
    _index('postal_records', 'school_id')

    # Exams
    op.create_table(
        'exam_groups',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('exam_type', sa.String(length=16), nullable=False, server_default='term'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'name', name='uq_exam_groups_school_name'),
        sa.CheckConstraint("exam_type IN ('term','unit','final','other')", name='ck_exam_groups_type')
    )
    _index('exam_groups', 'school_id')

    op.create_table(
        'exams',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('exam_group_id', _uuid(), nullable=True),
        sa.Column('session_id', _uuid(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.ForeignKeyConstraint(['exam_group_id'], ['exam_groups.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['session_id'], ['academic_sessions.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'session_id', 'name', name='uq_exams_school_session_name')
    )
    _index('exams', 'school_id', 'exam_group_id', 'session_id')

    op.create_table(
        'exam_subjects',
        *_tenant_columns(),
        sa.Column('exam_id', _uuid(), nullable=False),
        sa.Column('subject_id', _uuid(), nullable=False),
        sa.Column('exam_date', sa.Date(), nullable=True),
        sa.Column('start_time', sa.String(length=8), nullable=True),
        sa.Column('end_time', sa.String(length=8), nullable=True),
        sa.Column('room_no', sa.String(length=16), nullable=True),
        sa.Column('max_marks', sa.Numeric(6, 2), nullable=False, server_default='100'),
        sa.Column('min_marks', sa.Numeric(6, 2), nullable=False, server_default='33'),
        sa.ForeignKeyConstraint(['exam_id'], ['exams.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('exam_id', 'subject_id', name='uq_exam_subjects_exam_subject'),
        sa.CheckConstraint('min_marks >= 0 AND min_marks <= max_marks', name='ck_exam_subjects_marks')
    )
    _index('exam_subjects', 'school_id', 'exam_id', 'subject_id')

    op.create_table(
        'exam_results',
        *_tenant_columns(),
        sa.Column('exam_subject_id', _uuid(), nullable=False),
        sa.Column('student_id', _uuid(), nullable=False),
        sa.Column('marks_obtained', sa.Numeric(6, 2), nullable=True),
        sa.Column('is_absent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('note', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['exam_subject_id'], ['exam_subjects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('exam_subject_id', 'student_id', name='uq_exam_results_subject_student'),
        sa.CheckConstraint('marks_obtained IS NULL OR marks_obtained >= 0', name='ck_exam_results_marks')
    )
    _index('exam_results', 'school_id', 'exam_subject_id', 'student_id')

    # Attendance, one row per person per day
    op.create_table(
        'student_attendance',
        *_tenant_columns(),
        sa.Column('student_id', _uuid(), nullable=False),
        sa.Column('attendance_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('remark', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('student_id', 'attendance_date', name='uq_student_attendance_student_date'),
        sa.CheckConstraint(f'status IN {STATUSES}', name='ck_student_attendance_status')
    )
    _index('student_attendance', 'school_id', 'student_id', 'attendance_date')

    op.create_table(
        'staff_attendance',
        *_tenant_columns(),
        sa.Column('staff_id', _uuid(), nullable=False),
        sa.Column('attendance_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('check_in', sa.String(length=8), nullable=True),
        sa.Column('check_out', sa.String(length=8), nullable=True),
        sa.Column('remark', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('staff_id', 'attendance_date', name='uq_staff_attendance_staff_date'),
        sa.CheckConstraint(f'status IN {STATUSES}', name='ck_staff_attendance_status')
    )
    _index('staff_attendance', 'school_id', 'staff_id', 'attendance_date')

    # Homework
    op.create_table(
        'homework',
        *_tenant_columns(),
        sa.Column('class_id', _uuid(), nullable=False),
        sa.Column('section_id', _uuid(), nullable=False),
        sa.Column('subject_id', _uuid(), nullable=False),
        sa.Column('staff_id', _uuid(), nullable=True),
        sa.Column('title', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('homework_date', sa.Date(), nullable=False),
        sa.Column('submission_date', sa.Date(), nullable=False),
        sa.Column('max_marks', sa.Numeric(6, 2), nullable=True),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['section_id'], ['sections.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='SET NULL'),
        sa.CheckConstraint('homework_date <= submission_date', name='ck_homework_dates')
    )
    _index('homework', 'school_id', 'class_id', 'section_id', 'subject_id', 'staff_id')

    op.create_table(
        'homework_submissions',
        *_tenant_columns(),
        sa.Column('homework_id', _uuid(), nullable=False),
        sa.Column('student_id', _uuid(), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('marks', sa.Numeric(6, 2), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('evaluated_at', sa.DateTime(), nullable=True),
        sa.Column('evaluated_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['homework_id'], ['homework.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['evaluated_by'], ['users.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('homework_id', 'student_id', name='uq_homework_submissions_homework_student'),
        sa.CheckConstraint("status IN ('pending','accepted','rejected')", name='ck_homework_submissions_status')
    )
    _index('homework_submissions', 'school_id', 'homework_id', 'student_id')

    # Calendar and notice board
    op.create_table(
        'events',
        *_tenant_columns(),
        sa.Column('title', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=128), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_holiday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('event_for', sa.String(length=16), nullable=False, server_default='all'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint('start_date <= end_date', name='ck_events_dates'),
        sa.CheckConstraint(f'event_for IN {AUDIENCES}', name='ck_events_event_for')
    )
    _index('events', 'school_id')

    op.create_table(
        'notices',
        *_tenant_columns(),
        sa.Column('title', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('notice_date', sa.Date(), nullable=False),
        sa.Column('publish_on', sa.Date(), nullable=True),
        sa.Column('notice_for', sa.String(length=16), nullable=False, server_default='all'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint(f'notice_for IN {AUDIENCES}', name='ck_notices_notice_for')
    )
    _index('notices', 'school_id')


def downgrade():
    # Restore the free-text category before its table goes
    op.add_column('students', sa.Column('category', sa.String(length=32), nullable=True))
    op.execute(
        """
        UPDATE students SET category = sc.name
        FROM student_categories sc
        WHERE sc.id = students.category_id
        """
    )
    op.drop_index('ix_students_house_id', table_name='students')
    op.drop_index('ix_students_category_id', table_name='students')
    op.drop_constraint('fk_students_house_id', 'students', type_='foreignkey')
    op.drop_constraint('fk_students_category_id', 'students', type_='foreignkey')
    op.drop_column('students', 'house_id')
    op.drop_column('students', 'category_id')

    for table in reversed(NEW_TABLES):
        op.drop_table(table)
