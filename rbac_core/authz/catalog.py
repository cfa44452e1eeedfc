"""
Permission catalog.

The closed set of capability identifiers a role can grant. Role records
store these as their lower-case string values; anything not listed here is
a data-integrity anomaly (see resolver.py), never a grant.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Permission(str, Enum):
    # Users & roles
    VIEW_USERS = "view_users"
    MANAGE_USERS = "manage_users"
    CREATE_ROLE = "create_role"
    EDIT_ROLE = "edit_role"
    DELETE_ROLE = "delete_role"
    VIEW_ROLES = "view_roles"
    ASSIGN_USERS_TO_ROLES = "assign_users_to_roles"
    REMOVE_USERS_FROM_ROLES = "remove_users_from_roles"
    VIEW_ACCOUNTS_TAB = "view_accounts_tab"
    ASSIGN_ACCOUNT_USERS = "assign_account_users"
    REMOVE_ACCOUNT_USERS = "remove_account_users"

    # Departments
    CREATE_DEPARTMENT = "create_department"
    EDIT_DEPARTMENT = "edit_department"
    DELETE_DEPARTMENT = "delete_department"
    VIEW_DEPARTMENTS = "view_departments"
    VIEW_ALL_DEPARTMENTS = "view_all_departments"
    MANAGE_DEPARTMENT = "manage_department"
    MANAGE_ALL_DEPARTMENTS = "manage_all_departments"

    # Accounts
    CREATE_ACCOUNT = "create_account"
    EDIT_ACCOUNT = "edit_account"
    DELETE_ACCOUNT = "delete_account"
    VIEW_ACCOUNTS = "view_accounts"
    VIEW_ALL_ACCOUNTS = "view_all_accounts"

    # Projects
    CREATE_PROJECT = "create_project"
    EDIT_PROJECT = "edit_project"
    DELETE_PROJECT = "delete_project"
    VIEW_PROJECTS = "view_projects"
    VIEW_ALL_PROJECTS = "view_all_projects"
    EDIT_ALL_PROJECTS = "edit_all_projects"
    DELETE_ALL_PROJECTS = "delete_all_projects"
    ASSIGN_PROJECT_USERS = "assign_project_users"
    REMOVE_PROJECT_USERS = "remove_project_users"

    # Project updates
    VIEW_UPDATES = "view_updates"
    CREATE_UPDATE = "create_update"
    EDIT_UPDATE = "edit_update"
    DELETE_UPDATE = "delete_update"
    VIEW_ALL_PROJECT_UPDATES = "view_all_project_updates"
    VIEW_ASSIGNED_PROJECTS_UPDATES = "view_assigned_projects_updates"
    VIEW_DEPARTMENT_PROJECTS_UPDATES = "view_department_projects_updates"
    VIEW_ACCOUNT_PROJECTS_UPDATES = "view_account_projects_updates"

    # Issues
    VIEW_ISSUES = "view_issues"
    CREATE_ISSUE = "create_issue"
    EDIT_ISSUE = "edit_issue"
    DELETE_ISSUE = "delete_issue"

    # Tasks
    VIEW_TASKS = "view_tasks"
    CREATE_TASK = "create_task"
    EDIT_TASK = "edit_task"
    DELETE_TASK = "delete_task"
    ASSIGN_TASK = "assign_task"

    # Kanban, Gantt and table views
    VIEW_KANBAN = "view_kanban"
    EDIT_KANBAN_LAYOUT = "edit_kanban_layout"
    MOVE_ALL_KANBAN_ITEMS = "move_all_kanban_items"
    VIEW_GANTT = "view_gantt"
    EDIT_GANTT = "edit_gantt"
    VIEW_TABLE = "view_table"
    EDIT_TABLE = "edit_table"

    # Newsletters
    VIEW_NEWSLETTERS = "view_newsletters"
    CREATE_NEWSLETTER = "create_newsletter"
    EDIT_NEWSLETTER = "edit_newsletter"
    DELETE_NEWSLETTER = "delete_newsletter"

    # Analytics
    VIEW_ANALYTICS = "view_analytics"
    VIEW_DEPARTMENT_ANALYTICS = "view_department_analytics"
    VIEW_ALL_ANALYTICS = "view_all_analytics"

    # Capacity & time tracking
    EDIT_OWN_AVAILABILITY = "edit_own_availability"
    VIEW_OWN_CAPACITY = "view_own_capacity"
    VIEW_TEAM_CAPACITY = "view_team_capacity"
    VIEW_ALL_CAPACITY = "view_all_capacity"
    ALLOCATE_TASK_WEEKS = "allocate_task_weeks"
    VIEW_CAPACITY_ANALYTICS = "view_capacity_analytics"
    LOG_TIME = "log_time"
    LOG_TIME_ALL_PROJECT_TASKS = "log_time_all_project_tasks"
    EDIT_OWN_TIME_ENTRIES = "edit_own_time_entries"
    VIEW_TEAM_TIME_ENTRIES = "view_team_time_entries"
    EDIT_TEAM_TIME_ENTRIES = "edit_team_time_entries"

    # Profile
    VIEW_OWN_PROFILE = "view_own_profile"
    EDIT_OWN_PROFILE = "edit_own_profile"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PermissionDefinition:
    """Human-readable metadata for a catalog entry."""

    name: str
    description: str
    category: str
    is_override: bool = False


def _d(name: str, description: str, category: str, *, is_override: bool = False) -> PermissionDefinition:
    return PermissionDefinition(name=name, description=description, category=category, is_override=is_override)


_DEFINITIONS: dict[Permission, PermissionDefinition] = {
    Permission.VIEW_USERS: _d("View Users", "View user profiles and their role assignments", "Users & Roles"),
    Permission.MANAGE_USERS: _d("Manage Users", "Full user management: view, edit and delete users", "Users & Roles"),
    Permission.CREATE_ROLE: _d("Create Roles", "Create new roles", "Users & Roles"),
    Permission.EDIT_ROLE: _d("Edit Roles", "Modify role settings and permissions", "Users & Roles"),
    Permission.DELETE_ROLE: _d("Delete Roles", "Remove roles", "Users & Roles"),
    Permission.VIEW_ROLES: _d("View Roles", "View roles and their configuration", "Users & Roles"),
    Permission.ASSIGN_USERS_TO_ROLES: _d("Assign Users to Roles", "Grant roles to users", "Users & Roles"),
    Permission.REMOVE_USERS_FROM_ROLES: _d("Remove Users from Roles", "Revoke roles from users", "Users & Roles"),
    Permission.VIEW_ACCOUNTS_TAB: _d(
        "View Accounts Tab", "View the accounts tab of role management", "Users & Roles"
    ),
    Permission.ASSIGN_ACCOUNT_USERS: _d(
        "Assign Users to Accounts", "Add users to accounts from role management", "Users & Roles"
    ),
    Permission.REMOVE_ACCOUNT_USERS: _d(
        "Remove Users from Accounts", "Remove users from accounts from role management", "Users & Roles"
    ),
    Permission.CREATE_DEPARTMENT: _d("Create Departments", "Create new departments", "Departments"),
    Permission.EDIT_DEPARTMENT: _d("Edit Departments", "Modify department settings", "Departments"),
    Permission.DELETE_DEPARTMENT: _d("Delete Departments", "Remove departments", "Departments"),
    Permission.VIEW_DEPARTMENTS: _d("View Departments", "View departments the user belongs to", "Departments"),
    Permission.VIEW_ALL_DEPARTMENTS: _d(
        "View All Departments", "View every department in the organization", "Departments", is_override=True
    ),
    Permission.MANAGE_DEPARTMENT: _d(
        "Manage Department", "Administer the department a role is scoped to", "Departments"
    ),
    Permission.MANAGE_ALL_DEPARTMENTS: _d(
        "Manage All Departments", "Administer every department in the organization", "Departments", is_override=True
    ),
    Permission.CREATE_ACCOUNT: _d("Create Accounts", "Create new client accounts", "Accounts"),
    Permission.EDIT_ACCOUNT: _d("Edit Accounts", "Modify account information", "Accounts"),
    Permission.DELETE_ACCOUNT: _d("Delete Accounts", "Remove client accounts", "Accounts"),
    Permission.VIEW_ACCOUNTS: _d("View Accounts", "View accounts the user has access to", "Accounts"),
    Permission.VIEW_ALL_ACCOUNTS: _d(
        "View All Accounts", "View every account in the organization", "Accounts", is_override=True
    ),
    Permission.CREATE_PROJECT: _d("Create Projects", "Create new projects", "Projects"),
    Permission.EDIT_PROJECT: _d("Edit Projects", "Modify assigned projects", "Projects"),
    Permission.DELETE_PROJECT: _d("Delete Projects", "Remove assigned projects", "Projects"),
    Permission.VIEW_PROJECTS: _d("View Projects", "View assigned projects", "Projects"),
    Permission.VIEW_ALL_PROJECTS: _d("View All Projects", "View every project", "Projects", is_override=True),
    Permission.EDIT_ALL_PROJECTS: _d("Edit All Projects", "Modify every project", "Projects", is_override=True),
    Permission.DELETE_ALL_PROJECTS: _d("Delete All Projects", "Remove any project", "Projects", is_override=True),
    Permission.ASSIGN_PROJECT_USERS: _d("Assign Users to Projects", "Assign team members to projects", "Projects"),
    Permission.REMOVE_PROJECT_USERS: _d("Remove Users from Projects", "Remove team members from projects", "Projects"),
    Permission.VIEW_UPDATES: _d("View Project Updates", "View updates on project pages", "Updates"),
    Permission.CREATE_UPDATE: _d("Create Project Updates", "Post project status updates", "Updates"),
    Permission.EDIT_UPDATE: _d("Edit Project Updates", "Modify project status updates", "Updates"),
    Permission.DELETE_UPDATE: _d("Delete Project Updates", "Remove project status updates", "Updates"),
    Permission.VIEW_ALL_PROJECT_UPDATES: _d(
        "View All Project Updates", "View every project update on the welcome page", "Updates", is_override=True
    ),
    Permission.VIEW_ASSIGNED_PROJECTS_UPDATES: _d(
        "View Assigned Projects Updates", "View updates for projects the user works on", "Updates"
    ),
    Permission.VIEW_DEPARTMENT_PROJECTS_UPDATES: _d(
        "View Department Projects Updates", "View updates for projects of the user's departments", "Updates"
    ),
    Permission.VIEW_ACCOUNT_PROJECTS_UPDATES: _d(
        "View Account Projects Updates", "View updates for projects of the user's accounts", "Updates"
    ),
    Permission.VIEW_ISSUES: _d("View Project Issues", "View project issues and blockers", "Issues"),
    Permission.CREATE_ISSUE: _d("Create Project Issues", "Report new project issues", "Issues"),
    Permission.EDIT_ISSUE: _d("Edit Project Issues", "Modify existing project issues", "Issues"),
    Permission.DELETE_ISSUE: _d("Delete Project Issues", "Remove project issues", "Issues"),
    Permission.VIEW_TASKS: _d("View Tasks", "View tasks in accessible projects", "Tasks"),
    Permission.CREATE_TASK: _d("Create Tasks", "Create tasks in accessible projects", "Tasks"),
    Permission.EDIT_TASK: _d("Edit Tasks", "Modify tasks in accessible projects", "Tasks"),
    Permission.DELETE_TASK: _d("Delete Tasks", "Remove tasks in accessible projects", "Tasks"),
    Permission.ASSIGN_TASK: _d("Assign Tasks", "Assign and reassign tasks", "Tasks"),
    Permission.VIEW_KANBAN: _d("View Kanban", "View Kanban boards", "Kanban"),
    Permission.EDIT_KANBAN_LAYOUT: _d("Edit Kanban Layout", "Modify Kanban board layout and columns", "Kanban"),
    Permission.MOVE_ALL_KANBAN_ITEMS: _d(
        "Move All Kanban Items", "Move every item on the Kanban board, not only assigned ones", "Kanban"
    ),
    Permission.VIEW_GANTT: _d("View Gantt", "View Gantt charts", "Gantt"),
    Permission.EDIT_GANTT: _d("Edit Gantt", "Move tasks, add milestones and modify dates on the Gantt chart", "Gantt"),
    Permission.VIEW_TABLE: _d("View Table", "View the project table", "Table View"),
    Permission.EDIT_TABLE: _d("Edit Table", "Modify, assign and delete projects from the table view", "Table View"),
    Permission.VIEW_NEWSLETTERS: _d("View Newsletters", "View company newsletters on the welcome page", "Newsletters"),
    Permission.CREATE_NEWSLETTER: _d("Create Newsletters", "Create new newsletters", "Newsletters"),
    Permission.EDIT_NEWSLETTER: _d("Edit Newsletters", "Modify existing newsletters", "Newsletters"),
    Permission.DELETE_NEWSLETTER: _d("Delete Newsletters", "Remove newsletters", "Newsletters"),
    Permission.VIEW_ANALYTICS: _d("View Analytics", "View personal analytics", "Analytics"),
    Permission.VIEW_DEPARTMENT_ANALYTICS: _d(
        "View Department Analytics", "View analytics of the user's departments", "Analytics"
    ),
    Permission.VIEW_ALL_ANALYTICS: _d(
        "View All Analytics", "View organization-wide analytics", "Analytics", is_override=True
    ),
    Permission.EDIT_OWN_AVAILABILITY: _d(
        "Edit Own Availability", "Set and manage personal weekly work availability", "Capacity"
    ),
    Permission.VIEW_OWN_CAPACITY: _d("View Own Capacity", "View personal capacity metrics", "Capacity"),
    Permission.VIEW_TEAM_CAPACITY: _d("View Team Capacity", "View team and department capacity", "Capacity"),
    Permission.VIEW_ALL_CAPACITY: _d(
        "View All Capacity", "View organization-wide capacity", "Capacity", is_override=True
    ),
    Permission.ALLOCATE_TASK_WEEKS: _d(
        "Allocate Task Weeks", "Allocate tasks to specific weeks for capacity planning", "Capacity"
    ),
    Permission.VIEW_CAPACITY_ANALYTICS: _d(
        "View Capacity Analytics", "Access the capacity analytics dashboard and reports", "Capacity"
    ),
    Permission.LOG_TIME: _d("Log Time", "Log time entries on assigned tasks", "Time Tracking"),
    Permission.LOG_TIME_ALL_PROJECT_TASKS: _d(
        "Log Time to All Project Tasks", "Log time to any task in assigned projects", "Time Tracking"
    ),
    Permission.EDIT_OWN_TIME_ENTRIES: _d("Edit Own Time Entries", "Edit and delete own time entries", "Time Tracking"),
    Permission.VIEW_TEAM_TIME_ENTRIES: _d(
        "View Team Time Entries", "View time entries logged by team members", "Time Tracking"
    ),
    Permission.EDIT_TEAM_TIME_ENTRIES: _d(
        "Edit Team Time Entries", "Edit and delete time entries logged by team members", "Time Tracking"
    ),
    Permission.VIEW_OWN_PROFILE: _d("View Own Profile", "View own profile", "Profile"),
    Permission.EDIT_OWN_PROFILE: _d("Edit Own Profile", "Edit own profile", "Profile"),
}

PERMISSION_DEFINITIONS: Mapping[Permission, PermissionDefinition] = MappingProxyType(_DEFINITIONS)

ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

OVERRIDE_PERMISSIONS: frozenset[Permission] = frozenset(
    p for p, definition in _DEFINITIONS.items() if definition.is_override
)

# Holding any of these makes a user "admin level" (coarse gate only).
ADMIN_LEVEL_PERMISSIONS: frozenset[Permission] = frozenset(
    {
        Permission.MANAGE_USERS,
        Permission.CREATE_ROLE,
        Permission.CREATE_DEPARTMENT,
        Permission.CREATE_ACCOUNT,
    }
)

_BY_VALUE: dict[str, Permission] = {p.value: p for p in Permission}


def lookup_permission(raw: object) -> Permission | None:
    """Map a stored identifier to a catalog member, or None if it is not one."""

    if isinstance(raw, Permission):
        return raw
    if isinstance(raw, str):
        return _BY_VALUE.get(raw)
    return None


def permissions_in_category(category: str) -> tuple[Permission, ...]:
    return tuple(p for p in Permission if _DEFINITIONS[p].category == category)
