from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from rbac_core.authz import Permission
from rbac_core.db.base import Base
from rbac_core.db.session import SessionLocal, engine
from rbac_core.models.security import Department, Role, User


def init_db(seed: bool = True) -> None:
    """
    Create tables and, optionally, seed demo data.

    The seed is small and deterministic so the authorization behavior can be
    tried without additional setup.
    """

    Base.metadata.create_all(bind=engine)

    if not seed:
        return

    with SessionLocal() as db:
        if _has_seed_data(db):
            return
        seed_demo_data(db)


def _has_seed_data(db: Session) -> bool:
    return db.execute(select(Department.id).limit(1)).first() is not None


def _grants(*permissions: Permission) -> dict[str, bool]:
    return {p.value: True for p in permissions}


def seed_demo_data(db: Session) -> None:
    # Departments
    ops = Department(id="dept-ops", name="Operations", description="Service operations")
    eng = Department(id="dept-eng", name="Engineering", description="Engineering")
    fin = Department(id="dept-fin", name="Finance", description="Finance")
    db.add_all([ops, eng, fin])
    db.flush()

    # Roles
    admin = Role(
        id="role-admin",
        name="Administrator",
        description="Organization administrator",
        permissions=_grants(
            Permission.MANAGE_USERS,
            Permission.VIEW_USERS,
            Permission.CREATE_ROLE,
            Permission.EDIT_ROLE,
            Permission.VIEW_ROLES,
            Permission.VIEW_ALL_DEPARTMENTS,
            Permission.MANAGE_ALL_DEPARTMENTS,
        ),
    )
    executive = Role(
        id="role-executive",
        name="Executive",
        description="Read access across the organization",
        permissions=_grants(Permission.VIEW_ALL_DEPARTMENTS, Permission.VIEW_ALL_ANALYTICS),
    )
    eng_lead = Role(
        id="role-eng-lead",
        name="Engineering Lead",
        department_id=eng.id,
        permissions=_grants(Permission.VIEW_USERS, Permission.MANAGE_DEPARTMENT, Permission.ASSIGN_TASK),
    )
    engineer = Role(
        id="role-engineer",
        name="Engineer",
        department_id=eng.id,
        permissions=_grants(Permission.VIEW_TASKS, Permission.LOG_TIME),
    )
    ops_member = Role(
        id="role-ops",
        name="Operations Coordinator",
        department_id=ops.id,
        permissions=_grants(Permission.VIEW_PROJECTS, Permission.VIEW_TASKS),
    )
    db.add_all([admin, executive, eng_lead, engineer, ops_member])
    db.flush()

    # Users
    u1 = User(id="user-root", name="Riley Root", email="root@example.com", is_superadmin=True)

    u2 = User(id="user-alex", name="Alex Admin", email="alex.admin@example.com")
    u2.roles.append(admin)

    u3 = User(id="user-erin", name="Erin Executive", email="erin.exec@example.com")
    u3.roles.append(executive)

    u4 = User(id="user-lee", name="Lee Lead", email="lee.lead@example.com")
    u4.roles.extend([eng_lead, ops_member])

    u5 = User(id="user-ed", name="Ed Engineer", email="ed.engineer@example.com")
    u5.roles.append(engineer)

    u6 = User(id="user-nora", name="Nora New", email="nora.new@example.com")

    db.add_all([u1, u2, u3, u4, u5, u6])
    db.commit()
