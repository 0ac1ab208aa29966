"""initial schema

Revision ID: 4f1c2a7b9d10
Revises:
Create Date: 2026-01-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4f1c2a7b9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid():
    return postgresql.UUID(as_uuid=True)


def _base_columns():
    return [
        sa.Column('id', _uuid(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def _tenant_columns():
    """id, timestamps and the owning school; rows go with their school"""
    return _base_columns() + [
        sa.Column('school_id', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    ]


def _index(table, *columns):
    for column in columns:
        op.create_index(f'ix_{table}_{column}', table, [column])


# Creation order; foreign keys only point at earlier tables
TABLES = [
    'schools', 'permissions', 'roles', 'role_permissions',
    'departments', 'designations', 'staff',
    'academic_sessions', 'sections', 'classes', 'class_sections', 'subjects',
    'parents', 'hostels', 'room_types', 'hostel_rooms',
    'transport_routes', 'pickup_points', 'vehicles',
    'students', 'student_sessions', 'users', 'staff_leaves',
    'fee_types', 'fee_groups', 'fee_masters', 'student_fee_assignments', 'fee_payments',
    'incomes', 'expenses',
    'item_stores', 'items', 'item_issues',
    'books', 'library_members', 'book_issues',
    'visitors',
]


def upgrade():
    # Tenants and the global permission catalogue
    op.create_table(
        'schools',
        *_base_columns(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('email', sa.String(length=128), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('address', sa.String(length=256), nullable=True),
        sa.Column('currency_code', sa.String(length=8), nullable=False, server_default='USD'),
        sa.Column('currency_symbol', sa.String(length=8), nullable=False, server_default='$'),
        sa.Column('timezone', sa.String(length=64), nullable=False, server_default='UTC'),
        sa.Column('date_format', sa.String(length=32), nullable=False, server_default='YYYY-MM-DD'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code', name='uq_schools_code')
    )
    op.create_table(
        'permissions',
        *_base_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('slug', sa.String(length=64), nullable=False),
        sa.Column('module', sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug', name='uq_permissions_slug')
    )
    _index('permissions', 'module')

    op.create_table(
        'roles',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('slug', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('school_id', 'name', name='uq_roles_school_name'),
        sa.UniqueConstraint('school_id', 'slug', name='uq_roles_school_slug')
    )
    _index('roles', 'school_id')

    op.create_table(
        'role_permissions',
        sa.Column('role_id', _uuid(), nullable=False),
        sa.Column('permission_id', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('role_id', 'permission_id')
    )

    # Staff
    for table in ('departments', 'designations'):
        op.create_table(
            table,
            *_tenant_columns(),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.UniqueConstraint('school_id', 'name', name=f'uq_{table}_school_name')
        )
        _index(table, 'school_id')

    op.create_table(
        'staff',
        *_tenant_columns(),
        sa.Column('employee_id', sa.String(length=32), nullable=False),
        sa.Column('first_name', sa.String(length=64), nullable=False),
        sa.Column('last_name', sa.String(length=64), nullable=True),
        sa.Column('gender', sa.String(length=16), nullable=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('email', sa.String(length=128), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('qualification', sa.String(length=128), nullable=True),
        sa.Column('joining_date', sa.Date(), nullable=True),
        sa.Column('contract_type', sa.String(length=32), nullable=True),
        sa.Column('basic_salary', sa.Numeric(12, 2), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('role_id', _uuid(), nullable=True),
        sa.Column('department_id', _uuid(), nullable=True),
        sa.Column('designation_id', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['designation_id'], ['designations.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'employee_id', name='uq_staff_school_employee_id'),
        sa.UniqueConstraint('school_id', 'email', name='uq_staff_school_email')
    )
    _index('staff', 'school_id', 'role_id', 'department_id', 'designation_id')

    # Academics
    op.create_table(
        'academic_sessions',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=32), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('school_id', 'name', name='uq_academic_sessions_school_name')
    )
    _index('academic_sessions', 'school_id')

    op.create_table(
        'sections',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('school_id', 'name', name='uq_sections_school_name')
    )
    _index('sections', 'school_id')

    op.create_table(
        'classes',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('school_id', 'name', name='uq_classes_school_name')
    )
    _index('classes', 'school_id')

    op.create_table(
        'class_sections',
        *_tenant_columns(),
        sa.Column('class_id', _uuid(), nullable=False),
        sa.Column('section_id', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['section_id'], ['sections.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('class_id', 'section_id', name='uq_class_sections_class_section')
    )
    _index('class_sections', 'school_id', 'class_id', 'section_id')

    op.create_table(
        'subjects',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=True),
        sa.Column('subject_type', sa.String(length=16), nullable=False, server_default='theory'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('school_id', 'name', name='uq_subjects_school_name'),
        sa.UniqueConstraint('school_id', 'code', name='uq_subjects_school_code'),
        sa.CheckConstraint("subject_type IN ('theory','practical')", name='ck_subjects_type')
    )
    _index('subjects', 'school_id')

    # Parents, hostel and transport come before the students that point at them
    op.create_table(
        'parents',
        *_tenant_columns(),
        sa.Column('father_name', sa.String(length=128), nullable=True),
        sa.Column('father_phone', sa.String(length=32), nullable=True),
        sa.Column('mother_name', sa.String(length=128), nullable=True),
        sa.Column('mother_phone', sa.String(length=32), nullable=True),
        sa.Column('guardian_name', sa.String(length=128), nullable=False),
        sa.Column('guardian_relation', sa.String(length=32), nullable=True),
        sa.Column('guardian_phone', sa.String(length=32), nullable=False),
        sa.Column('guardian_email', sa.String(length=128), nullable=True),
        sa.Column('occupation', sa.String(length=64), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'guardian_phone', name='uq_parents_school_guardian_phone')
    )
    _index('parents', 'school_id')

    op.create_table(
        'hostels',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('hostel_type', sa.String(length=16), nullable=False, server_default='combined'),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('intake', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('school_id', 'name', name='uq_hostels_school_name'),
        sa.CheckConstraint("hostel_type IN ('boys','girls','combined')", name='ck_hostels_type')
    )
    _index('hostels', 'school_id')

    op.create_table(
        'room_types',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'name', name='uq_room_types_school_name')
    )
    _index('room_types', 'school_id')

    op.create_table(
        'hostel_rooms',
        *_tenant_columns(),
        sa.Column('hostel_id', _uuid(), nullable=False),
        sa.Column('room_type_id', _uuid(), nullable=True),
        sa.Column('room_no', sa.String(length=16), nullable=False),
        sa.Column('beds', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('cost_per_bed', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['hostel_id'], ['hostels.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'hostel_id', 'room_no', name='uq_hostel_rooms_hostel_room_no'),
        sa.CheckConstraint('beds > 0', name='ck_hostel_rooms_beds')
    )
    _index('hostel_rooms', 'school_id', 'hostel_id', 'room_type_id')

    op.create_table(
        'transport_routes',
        *_tenant_columns(),
        sa.Column('title', sa.String(length=64), nullable=False),
        sa.Column('fare', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'title', name='uq_transport_routes_school_title')
    )
    _index('transport_routes', 'school_id')

    op.create_table(
        'pickup_points',
        *_tenant_columns(),
        sa.Column('route_id', _uuid(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('pickup_time', sa.String(length=8), nullable=True),
        sa.Column('distance_km', sa.Numeric(6, 2), nullable=True),
        sa.ForeignKeyConstraint(['route_id'], ['transport_routes.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'route_id', 'name', name='uq_pickup_points_route_name')
    )
    _index('pickup_points', 'school_id', 'route_id')

    op.create_table(
        'vehicles',
        *_tenant_columns(),
        sa.Column('vehicle_no', sa.String(length=32), nullable=False),
        sa.Column('model', sa.String(length=64), nullable=True),
        sa.Column('driver_name', sa.String(length=64), nullable=True),
        sa.Column('driver_phone', sa.String(length=32), nullable=True),
        sa.Column('route_id', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['route_id'], ['transport_routes.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'vehicle_no', name='uq_vehicles_school_vehicle_no')
    )
    _index('vehicles', 'school_id', 'route_id')

    # Students
    op.create_table(
        'students',
        *_tenant_columns(),
        sa.Column('admission_no', sa.String(length=32), nullable=False),
        sa.Column('roll_no', sa.String(length=16), nullable=True),
        sa.Column('first_name', sa.String(length=64), nullable=False),
        sa.Column('last_name', sa.String(length=64), nullable=True),
        sa.Column('gender', sa.String(length=16), nullable=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('email', sa.String(length=128), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('admission_date', sa.Date(), nullable=True),
        sa.Column('category', sa.String(length=32), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('parent_id', _uuid(), nullable=True),
        sa.Column('hostel_room_id', _uuid(), nullable=True),
        sa.Column('pickup_point_id', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['parent_id'], ['parents.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['hostel_room_id'], ['hostel_rooms.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['pickup_point_id'], ['pickup_points.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'admission_no', name='uq_students_school_admission_no')
    )
    _index('students', 'school_id', 'parent_id', 'hostel_room_id', 'pickup_point_id')

    op.create_table(
        'student_sessions',
        *_tenant_columns(),
        sa.Column('student_id', _uuid(), nullable=False),
        sa.Column('session_id', _uuid(), nullable=False),
        sa.Column('class_section_id', _uuid(), nullable=False),
        sa.Column('roll_no', sa.String(length=16), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['session_id'], ['academic_sessions.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['class_section_id'], ['class_sections.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('student_id', 'session_id', name='uq_student_sessions_student_session')
    )
    _index('student_sessions', 'school_id', 'student_id', 'session_id', 'class_section_id')

    # Login principals, optionally linked 1:1 to a staff, student or parent profile
    op.create_table(
        'users',
        *_tenant_columns(),
        sa.Column('username', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=128), nullable=True),
        sa.Column('full_name', sa.String(length=128), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('user_type', sa.String(length=16), nullable=False, server_default='admin'),
        sa.Column('role_id', _uuid(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('staff_id', _uuid(), nullable=True),
        sa.Column('student_id', _uuid(), nullable=True),
        sa.Column('parent_id', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['parent_id'], ['parents.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sa.UniqueConstraint('staff_id', name='uq_users_staff_id'),
        sa.UniqueConstraint('student_id', name='uq_users_student_id'),
        sa.UniqueConstraint('parent_id', name='uq_users_parent_id'),
        sa.CheckConstraint("user_type IN ('admin','staff','student','parent')", name='ck_users_user_type')
    )
    _index('users', 'school_id', 'role_id')

    # Leave decisions are signed by a user
    op.create_table(
        'staff_leaves',
        *_tenant_columns(),
        sa.Column('staff_id', _uuid(), nullable=False),
        sa.Column('leave_type', sa.String(length=32), nullable=False),
        sa.Column('from_date', sa.Date(), nullable=False),
        sa.Column('to_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('decided_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['decided_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint("status IN ('pending','approved','rejected')", name='ck_staff_leaves_status'),
        sa.CheckConstraint('from_date <= to_date', name='ck_staff_leaves_dates')
    )
    _index('staff_leaves', 'school_id', 'staff_id')

    # Fees
    op.create_table(
        'fee_types',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'code', name='uq_fee_types_school_code')
    )
    _index('fee_types', 'school_id')

    op.create_table(
        'fee_groups',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'name', name='uq_fee_groups_school_name')
    )
    _index('fee_groups', 'school_id')

    op.create_table(
        'fee_masters',
        *_tenant_columns(),
        sa.Column('class_id', _uuid(), nullable=False),
        sa.Column('fee_group_id', _uuid(), nullable=False),
        sa.Column('fee_type_id', _uuid(), nullable=False),
        sa.Column('session_id', _uuid(), nullable=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('fine_type', sa.String(length=16), nullable=False, server_default='none'),
        sa.Column('fine_percentage', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('fine_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['fee_group_id'], ['fee_groups.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['fee_type_id'], ['fee_types.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['session_id'], ['academic_sessions.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'class_id', 'fee_group_id', 'fee_type_id', name='uq_fee_masters_class_group_type'),
        sa.CheckConstraint("fine_type IN ('none','percentage','fixed')", name='ck_fee_masters_fine_type'),
        sa.CheckConstraint('fine_percentage >= 0 AND fine_percentage <= 100', name='ck_fee_masters_fine_percentage'),
        sa.CheckConstraint('amount >= 0', name='ck_fee_masters_amount')
    )
    _index('fee_masters', 'school_id', 'class_id', 'fee_group_id', 'fee_type_id', 'session_id')

    op.create_table(
        'student_fee_assignments',
        *_tenant_columns(),
        sa.Column('student_id', _uuid(), nullable=False),
        sa.Column('fee_master_id', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fee_master_id'], ['fee_masters.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('student_id', 'fee_master_id', name='uq_student_fee_assignments_student_master')
    )
    _index('student_fee_assignments', 'school_id', 'student_id', 'fee_master_id')

    op.create_table(
        'fee_payments',
        *_tenant_columns(),
        sa.Column('student_id', _uuid(), nullable=False),
        sa.Column('assignment_id', _uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('fine', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('payment_mode', sa.String(length=16), nullable=False, server_default='Cash'),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('reference_no', sa.String(length=64), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('collected_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['assignment_id'], ['student_fee_assignments.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['collected_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('amount > 0', name='ck_fee_payments_amount')
    )
    _index('fee_payments', 'school_id', 'student_id', 'assignment_id')

    # Finance ledger
    for table in ('incomes', 'expenses'):
        op.create_table(
            table,
            *_tenant_columns(),
            sa.Column('head', sa.String(length=64), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('invoice_no', sa.String(length=64), nullable=True),
            sa.Column('entry_date', sa.Date(), nullable=False),
            sa.Column('amount', sa.Numeric(12, 2), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.CheckConstraint('amount > 0', name=f'ck_{table}_amount')
        )
        _index(table, 'school_id', 'head')

    # Inventory
    op.create_table(
        'item_stores',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('school_id', 'name', name='uq_item_stores_school_name'),
        sa.UniqueConstraint('school_id', 'code', name='uq_item_stores_school_code')
    )
    _index('item_stores', 'school_id')

    op.create_table(
        'items',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('unit', sa.String(length=16), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('store_id', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['store_id'], ['item_stores.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'name', name='uq_items_school_name'),
        sa.CheckConstraint('quantity >= 0', name='ck_items_quantity')
    )
    _index('items', 'school_id', 'store_id')

    op.create_table(
        'item_issues',
        *_tenant_columns(),
        sa.Column('item_id', _uuid(), nullable=False),
        sa.Column('issue_to', sa.String(length=128), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='issued'),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('issued_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['item_id'], ['items.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['issued_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('quantity > 0', name='ck_item_issues_quantity'),
        sa.CheckConstraint("status IN ('issued','returned')", name='ck_item_issues_status')
    )
    _index('item_issues', 'school_id', 'item_id')

    # Library
    op.create_table(
        'books',
        *_tenant_columns(),
        sa.Column('title', sa.String(length=256), nullable=False),
        sa.Column('book_no', sa.String(length=32), nullable=False),
        sa.Column('isbn', sa.String(length=32), nullable=True),
        sa.Column('author', sa.String(length=128), nullable=True),
        sa.Column('publisher', sa.String(length=128), nullable=True),
        sa.Column('subject', sa.String(length=64), nullable=True),
        sa.Column('rack_no', sa.String(length=16), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('available', sa.Integer(), nullable=False, server_default='1'),
        sa.UniqueConstraint('school_id', 'book_no', name='uq_books_school_book_no'),
        sa.CheckConstraint('available >= 0 AND available <= quantity', name='ck_books_available')
    )
    _index('books', 'school_id')

    op.create_table(
        'library_members',
        *_tenant_columns(),
        sa.Column('member_type', sa.String(length=16), nullable=False),
        sa.Column('library_card_no', sa.String(length=32), nullable=False),
        sa.Column('student_id', _uuid(), nullable=True),
        sa.Column('staff_id', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('school_id', 'library_card_no', name='uq_library_members_school_card_no'),
        sa.UniqueConstraint('student_id', name='uq_library_members_student_id'),
        sa.UniqueConstraint('staff_id', name='uq_library_members_staff_id'),
        sa.CheckConstraint("member_type IN ('student','staff')", name='ck_library_members_type')
    )
    _index('library_members', 'school_id')

    op.create_table(
        'book_issues',
        *_tenant_columns(),
        sa.Column('book_id', _uuid(), nullable=False),
        sa.Column('member_id', _uuid(), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='issued'),
        sa.Column('issued_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['member_id'], ['library_members.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['issued_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint("status IN ('issued','returned')", name='ck_book_issues_status')
    )
    _index('book_issues', 'school_id', 'book_id', 'member_id')

    # Front office
    op.create_table(
        'visitors',
        *_tenant_columns(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('purpose', sa.String(length=128), nullable=False),
        sa.Column('meeting_with', sa.String(length=128), nullable=True),
        sa.Column('id_card', sa.String(length=64), nullable=True),
        sa.Column('number_of_people', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('visit_date', sa.Date(), nullable=False),
        sa.Column('in_time', sa.DateTime(), nullable=False),
        sa.Column('out_time', sa.DateTime(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True)
    )
    _index('visitors', 'school_id')


def downgrade():
    # Indexes go with their tables
    for table in reversed(TABLES):
        op.drop_table(table)
