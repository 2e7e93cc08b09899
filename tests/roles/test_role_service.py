import pytest

from hrms_geo.core.exceptions import NotFoundError, ValidationError
from hrms_geo.roles.model import Role
from hrms_geo.roles.service import RoleService

from conftest import InMemoryRoles


@pytest.fixture
def service():
    return RoleService(InMemoryRoles())


def test_create_role_normalizes_permissions(service):
    role = service.create_role(
        1,
        name="  Recruiter ",
        permissions=["candidates:view", {"module": "candidates", "actions": ["view", "add"]}],
        created_by=1,
    )

    assert role.name == "Recruiter"
    assert role.permissions == ("candidates:view", "candidates:add")
    assert role.to_dict()["modulePermissions"] == [{"module": "candidates", "actions": ["view", "add"]}]


def test_create_role_rejects_system_and_duplicate_names(service):
    service.create_role(1, name="Recruiter")

    with pytest.raises(ValidationError, match="system role"):
        service.create_role(1, name="admin")
    with pytest.raises(ValidationError, match="already exists"):
        service.create_role(1, name="RECRUITER")
    # Names are unique per company only.
    assert service.create_role(2, name="Recruiter").company_id == 2


def test_create_role_rejects_unknown_permission(service):
    with pytest.raises(ValidationError):
        service.create_role(1, name="Bad", permissions=["spaceship:fly"])


def test_get_role_from_other_company_is_not_found(service):
    role = service.create_role(2, name="Elsewhere")

    with pytest.raises(NotFoundError):
        service.get_role(1, role.role_id)


def test_update_role_keeps_unspecified_fields(service):
    role = service.create_role(1, name="Recruiter", description="Hires", permissions=["staff:read"])

    updated = service.update_role(1, role.role_id, is_active=False)

    assert updated.description == "Hires"
    assert updated.permissions == ("staff:read",)
    assert updated.is_active is False

    cleared = service.update_role(1, role.role_id, description=None)
    assert cleared.description is None


def test_system_roles_cannot_be_renamed_or_deleted():
    roles = InMemoryRoles([Role(role_id=1, company_id=1, name="HR", is_system_role=True)])
    service = RoleService(roles)

    with pytest.raises(ValidationError):
        service.update_role(1, 1, name="People Ops")
    with pytest.raises(ValidationError):
        service.delete_role(1, 1)


def test_delete_role_with_children_rejected(service):
    parent = service.create_role(1, name="Lead")
    child = service.create_role(1, name="Member")
    service.update_hierarchy(1, child.role_id, parent_role_id=parent.role_id)

    with pytest.raises(ValidationError):
        service.delete_role(1, parent.role_id)

    service.delete_role(1, child.role_id)
    service.delete_role(1, parent.role_id)
    assert service.list_roles(1) == []


def test_hierarchy_levels_follow_parent(service):
    lead = service.create_role(1, name="Lead")
    member = service.create_role(1, name="Member")

    updated = service.update_hierarchy(1, member.role_id, parent_role_id=lead.role_id)
    assert updated.hierarchy_level == 1

    tree = service.hierarchy(1)
    assert [n["name"] for n in tree["hierarchy"]] == ["Lead"]
    assert tree["hierarchy"][0]["children"][0]["name"] == "Member"
    assert [r["name"] for r in tree["flat"]] == ["Lead", "Member"]

    detached = service.update_hierarchy(1, member.role_id, parent_role_id=None)
    assert detached.hierarchy_level == 0


def test_hierarchy_rejects_self_parent_and_cycles(service):
    a = service.create_role(1, name="A")
    b = service.create_role(1, name="B")
    service.update_hierarchy(1, b.role_id, parent_role_id=a.role_id)

    with pytest.raises(ValidationError, match="own parent"):
        service.update_hierarchy(1, a.role_id, parent_role_id=a.role_id)
    with pytest.raises(ValidationError, match="cycles"):
        service.update_hierarchy(1, a.role_id, parent_role_id=b.role_id)
    with pytest.raises(ValidationError):
        service.update_hierarchy(1, a.role_id, hierarchy_level=-1)


def test_hierarchy_rejects_non_integer_input(service):
    role = service.create_role(1, name="A")

    with pytest.raises(ValidationError, match="hierarchyLevel must be an integer"):
        service.update_hierarchy(1, role.role_id, hierarchy_level="abc")
    with pytest.raises(ValidationError, match="parentRoleId must be an integer"):
        service.update_hierarchy(1, role.role_id, parent_role_id="x")
    with pytest.raises(ValidationError, match="displayOrder must be an integer"):
        service.update_hierarchy(1, role.role_id, display_order=[1])

    assert service.update_hierarchy(1, role.role_id, hierarchy_level="2", display_order=3.0).hierarchy_level == 2


def test_permissions_for_admin_and_custom_roles(service):
    role = service.create_role(1, name="Recruiter", permissions=["candidates:view"])

    assert "payroll:delete" in service.permissions_for(1, "Admin", None)
    assert service.permissions_for(1, "Recruiter", role.role_id) == ("candidates:view",)
    assert service.permissions_for(2, "Recruiter", role.role_id) == ()

    service.update_role(1, role.role_id, is_active=False)
    assert service.permissions_for(1, "Recruiter", role.role_id) == ()
