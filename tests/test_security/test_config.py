"""Tests for the YAML security config loader and route matching."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rbac_core.authz import ADMIN_LEVEL_PERMISSIONS, DEFAULT_POLICY, Permission
from rbac_core.security.config import load_security_config
from rbac_core.settings import Settings


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "security.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_bundled_config_loads():
    config = load_security_config(Settings().resolved_security_config_path())

    assert config.auth.bearer_prefix == "Bearer"
    assert config.match("/health", "GET").auth_required is False
    assert config.match("/me", "get").auth_required is True
    assert config.match("/admin/rbac-diagnostics", "GET").required_permissions == {Permission.MANAGE_USERS}
    assert config.department_policy() == DEFAULT_POLICY


def test_template_match_and_defaults(tmp_path):
    config = load_security_config(
        _write(
            tmp_path,
            """
security:
  default:
    auth_required: false
  routes:
    - path: /departments/{department_id}/access
      methods: [GET]
      required_permissions: [view_departments]
    - path: /admin/area
      methods: [GET, POST]
      admin_level: true
""",
        )
    )

    rule = config.match("/departments/dept-A/access", "GET")
    assert rule.auth_required is True
    assert rule.required_permissions == {Permission.VIEW_DEPARTMENTS}

    admin_rule = config.match("/admin/area", "POST")
    assert admin_rule.auth_required is True
    assert admin_rule.admin_level is True

    fallback = config.match("/departments/dept-A/access", "DELETE")
    assert fallback.auth_required is False
    assert fallback.required_permissions == frozenset()
    assert fallback.admin_level is False


def test_exact_match_wins_over_template(tmp_path):
    config = load_security_config(
        _write(
            tmp_path,
            """
security:
  routes:
    - path: /departments/{department_id}
      required_permissions: [view_departments]
    - path: /departments/export
      required_permissions: [manage_all_departments]
""",
        )
    )
    assert config.match("/departments/export", "GET").required_permissions == {Permission.MANAGE_ALL_DEPARTMENTS}
    assert config.match("/departments/dept-A", "GET").required_permissions == {Permission.VIEW_DEPARTMENTS}


def test_department_access_policy_from_config(tmp_path):
    config = load_security_config(
        _write(
            tmp_path,
            """
security:
  department_access:
    view_override: view_departments
    manage_permission: edit_department
    manage_override: delete_department
    admin_permissions: [view_roles]
""",
        )
    )
    policy = config.department_policy()
    assert policy.view_override is Permission.VIEW_DEPARTMENTS
    assert policy.manage_permission is Permission.EDIT_DEPARTMENT
    assert policy.manage_override is Permission.DELETE_DEPARTMENT
    assert policy.admin_permissions == {Permission.VIEW_ROLES}


def test_department_access_defaults(tmp_path):
    config = load_security_config(_write(tmp_path, "security: {}\n"))
    assert config.department_policy() == DEFAULT_POLICY
    assert config.department_policy().admin_permissions == ADMIN_LEVEL_PERMISSIONS


def test_unknown_permission_in_config_is_rejected(tmp_path):
    path = _write(
        tmp_path,
        """
security:
  routes:
    - path: /x
      required_permissions: [DOES_NOT_EXIST]
""",
    )
    with pytest.raises(ValidationError):
        load_security_config(path)


def test_missing_security_key_is_rejected(tmp_path):
    with pytest.raises(ValueError, match="Missing top-level 'security' key"):
        load_security_config(_write(tmp_path, "other: {}\n"))
