from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from rbac_core.authz import ADMIN_LEVEL_PERMISSIONS, DepartmentAccessPolicy, Permission


class AuthConfig(BaseModel):
    provider: str = "demo"
    authorization_header: str = "Authorization"
    bearer_prefix: str = "Bearer"


class DefaultRule(BaseModel):
    auth_required: bool = True
    required_permissions: list[Permission] = Field(default_factory=list)
    admin_level: bool = False


class RouteRule(BaseModel):
    path: str
    methods: list[str] = Field(default_factory=lambda: ["GET"])

    auth_required: bool | None = None
    required_permissions: list[Permission] = Field(default_factory=list)
    admin_level: bool | None = None

    def normalized_methods(self) -> set[str]:
        return {m.upper() for m in self.methods}


class DepartmentAccessConfig(BaseModel):
    view_override: Permission = Permission.VIEW_ALL_DEPARTMENTS
    manage_permission: Permission = Permission.MANAGE_DEPARTMENT
    manage_override: Permission = Permission.MANAGE_ALL_DEPARTMENTS
    admin_permissions: list[Permission] = Field(default_factory=lambda: sorted(ADMIN_LEVEL_PERMISSIONS))


class SecurityConfigModel(BaseModel):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    default: DefaultRule = Field(default_factory=DefaultRule)
    routes: list[RouteRule] = Field(default_factory=list)
    department_access: DepartmentAccessConfig = Field(default_factory=DepartmentAccessConfig)


@dataclass(frozen=True)
class EffectiveRule:
    """
    Fully-resolved rule (defaults applied) for a particular request.
    """

    auth_required: bool
    required_permissions: frozenset[Permission]
    admin_level: bool


def _path_template_to_regex(path_template: str) -> re.Pattern[str]:
    # Convert "/departments/{department_id}/access" -> r"^/departments/[^/]+/access$"
    regex = re.sub(r"\{[^/]+\}", r"[^/]+", path_template)
    return re.compile(rf"^{regex}$")


class SecurityConfig:
    """
    Runtime helper around validated config + route matching.
    """

    def __init__(self, model: SecurityConfigModel):
        self.model = model

        compiled: list[tuple[str, re.Pattern[str], RouteRule]] = []
        for rule in self.model.routes:
            compiled.append((rule.path, _path_template_to_regex(rule.path), rule))

        # Prefer exact matches over templates.
        self._exact_rules: dict[str, list[RouteRule]] = {}
        for r in self.model.routes:
            self._exact_rules.setdefault(r.path, []).append(r)
        self._compiled_rules = compiled
        self._department_policy = DepartmentAccessPolicy(
            view_override=model.department_access.view_override,
            manage_permission=model.department_access.manage_permission,
            manage_override=model.department_access.manage_override,
            admin_permissions=frozenset(model.department_access.admin_permissions),
        )

    @property
    def auth(self) -> AuthConfig:
        return self.model.auth

    def department_policy(self) -> DepartmentAccessPolicy:
        return self._department_policy

    def match(self, path: str, method: str) -> EffectiveRule:
        """
        Find the best matching rule for (path, method), then apply defaults.
        """

        method = method.upper()
        default = self.model.default

        # 1) exact path match
        for candidate in self._exact_rules.get(path, []):
            if method in candidate.normalized_methods():
                return _effective(candidate, default)

        # 2) template match
        for _template, regex, candidate in self._compiled_rules:
            if method not in candidate.normalized_methods():
                continue
            if regex.match(path):
                return _effective(candidate, default)

        # 3) no match -> defaults
        return EffectiveRule(
            auth_required=default.auth_required,
            required_permissions=frozenset(default.required_permissions),
            admin_level=default.admin_level,
        )


def _effective(rule: RouteRule, default: DefaultRule) -> EffectiveRule:
    # A rule with any permission requirement is auth-required even if the
    # global default is "public".
    inferred_auth_required = default.auth_required or bool(rule.required_permissions) or bool(rule.admin_level)

    return EffectiveRule(
        auth_required=inferred_auth_required if rule.auth_required is None else rule.auth_required,
        required_permissions=frozenset(rule.required_permissions or default.required_permissions),
        admin_level=default.admin_level if rule.admin_level is None else rule.admin_level,
    )


def load_security_config(path: Path) -> SecurityConfig:
    raw_text = path.read_text(encoding="utf-8")
    raw: dict[str, Any] = yaml.safe_load(raw_text) or {}

    if "security" not in raw:
        raise ValueError(f"Missing top-level 'security' key in config: {path}")

    model = SecurityConfigModel.model_validate(raw["security"])
    return SecurityConfig(model)
