from __future__ import annotations

from flask import Flask

from ..common.validators import require_int
from ..container import Container
from ..web import admin_required, current_company_id, current_staff_id, json_body, login_required, ok
from .service import UNSET


def register(app: Flask, container: Container) -> None:
    @app.route("/api/roles/configuration", methods=["GET"], endpoint="roles_configuration")
    @login_required
    def roles_configuration():
        return ok(container.role_service.configuration())

    @app.route("/api/roles", methods=["GET"], endpoint="roles_list")
    @login_required
    def roles_list():
        roles = container.role_service.list_roles(current_company_id())
        return ok({"roles": [r.to_dict() for r in roles]})

    @app.route("/api/roles", methods=["POST"], endpoint="roles_create")
    @admin_required
    def roles_create():
        body = json_body()
        role = container.role_service.create_role(
            current_company_id(),
            name=body.get("name", ""),
            description=body.get("description"),
            permissions=body.get("permissions"),
            created_by=current_staff_id(),
        )
        return ok({"role": role.to_dict()}, 201)

    @app.route("/api/roles/hierarchy", methods=["GET"], endpoint="roles_hierarchy")
    @login_required
    def roles_hierarchy():
        return ok(container.role_service.hierarchy(current_company_id()))

    @app.route("/api/roles/hierarchy", methods=["PUT"], endpoint="roles_hierarchy_update")
    @admin_required
    def roles_hierarchy_update():
        body = json_body()
        role = container.role_service.update_hierarchy(
            current_company_id(),
            require_int(body.get("roleId"), "roleId"),
            parent_role_id=body["parentRoleId"] if "parentRoleId" in body else UNSET,
            hierarchy_level=body.get("hierarchyLevel"),
            display_order=body.get("displayOrder"),
        )
        return ok({"role": role.to_dict()})

    @app.route("/api/roles/<int:role_id>", methods=["GET"], endpoint="roles_get")
    @login_required
    def roles_get(role_id: int):
        return ok({"role": container.role_service.get_role(current_company_id(), role_id).to_dict()})

    @app.route("/api/roles/<int:role_id>", methods=["PUT"], endpoint="roles_update")
    @admin_required
    def roles_update(role_id: int):
        body = json_body()
        role = container.role_service.update_role(
            current_company_id(),
            role_id,
            name=body.get("name"),
            description=body["description"] if "description" in body else UNSET,
            permissions=body.get("permissions"),
            is_active=body.get("isActive"),
        )
        return ok({"role": role.to_dict()})

    @app.route("/api/roles/<int:role_id>", methods=["DELETE"], endpoint="roles_delete")
    @admin_required
    def roles_delete(role_id: int):
        container.role_service.delete_role(current_company_id(), role_id)
        return ok({"deleted": role_id})
