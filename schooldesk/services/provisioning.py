# schooldesk/services/provisioning.py - Permission catalogue and new-school setup
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from schooldesk.core.security import MIN_PASSWORD_LENGTH, hash_password
from schooldesk.models.school import School
from schooldesk.models.user import Permission, Role, RolePermission, User
from schooldesk.services.users import slugify

logger = logging.getLogger(__name__)

CRUD_MODULES = (
    "students", "parents", "staff", "academics", "attendance", "exams", "homework",
    "fees", "finance", "transport", "hostel", "library", "inventory", "front_office", "events",
)
ACTIONS = ("view", "create", "edit", "delete")
EXTRA_PERMISSIONS = (
    ("settings", "view"), ("settings", "edit"),
)

# Role name -> modules granted; "*" grants the whole catalogue
SYSTEM_ROLES: Dict[str, Tuple[Iterable[str], Iterable[str]]] = {
    "Super Admin": (("*",), ACTIONS),
    "Admin": (("*",), ACTIONS),
    "Teacher": (("students", "academics", "attendance", "exams", "homework", "library", "events"), ACTIONS),
    "Accountant": (("fees", "finance", "students", "parents"), ACTIONS),
    "Librarian": (("library", "students", "staff"), ACTIONS),
    "Student": (("academics", "attendance", "exams", "homework", "library", "events"), ("view",)),
    "Parent": (("students", "attendance", "exams", "homework", "fees", "events"), ("view",)),
}


def permission_catalogue() -> List[Tuple[str, str, str]]:
    """(slug, name, module) for every permission"""
    entries = []
    for module in CRUD_MODULES:
        for action in ACTIONS:
            entries.append((f"{module}.{action}", f"{action.title()} {module.replace('_', ' ')}", module))
    for module, action in EXTRA_PERMISSIONS:
        entries.append((f"{module}.{action}", f"{action.title()} {module}", module))
    return entries


def seed_permissions(db: Session) -> int:
    """Insert missing catalogue entries; safe to run repeatedly"""
    existing = set(db.execute(select(Permission.slug)).scalars().all())
    added = 0
    for slug, name, module in permission_catalogue():
        if slug not in existing:
            db.add(Permission(slug=slug, name=name, module=module))
            added += 1
    db.flush()
    if added:
        logger.info(f"Seeded {added} permission(s)")
    return added


def _grants(modules: Iterable[str], actions: Iterable[str], catalogue: Dict[str, Permission]) -> List[Permission]:
    modules = set(modules)
    actions = set(actions)
    granted = []
    for slug, permission in catalogue.items():
        module, action = slug.split(".", 1)
        if "*" in modules or (module in modules and (action in actions or action == "view")):
            granted.append(permission)
    return granted


def provision_school(
    db: Session,
    name: str,
    code: str,
    admin_username: str,
    admin_password: str,
    admin_email: Optional[str] = None,
    admin_full_name: Optional[str] = None,
    **school_fields,
) -> School:
    """
    Create a school with its system roles and an active Super Admin.

    Re-running for an existing code returns the existing school untouched.
    """
    code = code.strip().upper()
    school = db.execute(select(School).where(School.code == code)).scalar_one_or_none()
    if school is not None:
        logger.info(f"School {code} already provisioned")
        return school

    if len(admin_password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Admin password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        seed_permissions(db)
        catalogue = {p.slug: p for p in db.execute(select(Permission)).scalars().all()}

        school = School(name=name.strip(), code=code, **school_fields)
        db.add(school)
        db.flush()

        roles = {}
        for role_name, (modules, actions) in SYSTEM_ROLES.items():
            role = Role(school_id=school.id, name=role_name, slug=slugify(role_name), is_system=True)
            db.add(role)
            db.flush()
            for permission in _grants(modules, actions, catalogue):
                role.role_permissions.append(RolePermission(role_id=role.id, permission_id=permission.id))
            roles[role_name] = role

        db.add(User(
            school_id=school.id,
            username=admin_username.strip().lower(),
            email=admin_email,
            full_name=admin_full_name or "Super Admin",
            password_hash=hash_password(admin_password),
            user_type="admin",
            role_id=roles["Super Admin"].id,
            is_active=True,
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"School provisioned: {school.name} ({school.code})")
    return school
