"""Unit tests for the access-control predicates, run on unsaved ORM objects."""
import pytest

from recipe_hub.models.group import Group, GroupJoinRequest, GroupMember, GroupRole
from recipe_hub.models.moderation import ModerationStatus
from recipe_hub.models.recipe import Recipe
from recipe_hub.models.user import User, UserRole
from recipe_hub.services import access_policy


def make_user(user_id: str, role: UserRole = UserRole.user, groups=()) -> User:
    user = User(user_id=user_id, name=user_id, email=f"{user_id}@example.com", role=role)
    user.memberships = [GroupMember(group_id=g, user_id=user_id, role=GroupRole.member) for g in groups]
    return user


def make_group(owner: str = "owner", admins=(), members=(), pending=(), is_private=True,
               status=ModerationStatus.pending) -> Group:
    group = Group(group_id="g1", name="Group", description="Group", created_by=owner,
                  invite_code="ABC123", is_private=is_private, moderation_status=status)
    group.members = (
        [GroupMember(user_id=owner, role=GroupRole.owner)]
        + [GroupMember(user_id=u, role=GroupRole.admin) for u in admins]
        + [GroupMember(user_id=u, role=GroupRole.member) for u in members]
    )
    group.pending_requests = [GroupJoinRequest(user_id=u) for u in pending]
    return group


def make_recipe(author: str = "author", group_id=None, is_private=False,
                status=ModerationStatus.approved) -> Recipe:
    return Recipe(recipe_id="r1", title="Soup", description="Hot soup", author_id=author,
                  group_id=group_id, is_private=is_private, moderation_status=status)


SITE_ADMIN = make_user("site-admin", role=UserRole.admin)


class TestEnsure:

    def test_passes_when_allowed(self):
        access_policy.ensure(True, "never raised")

    def test_raises_forbidden(self):
        from fastapi import HTTPException
        with pytest.raises(HTTPException) as info:
            access_policy.ensure(False, "Nope")
        assert info.value.status_code == 403
        assert info.value.detail == "Nope"


class TestGroupPredicates:

    def test_member_role_lookup(self):
        group = make_group(admins=["a"], members=["m"])
        assert access_policy.member_role(group, "owner") == GroupRole.owner
        assert access_policy.member_role(group, "a") == GroupRole.admin
        assert access_policy.member_role(group, "m") == GroupRole.member
        assert access_policy.member_role(group, "x") is None
        assert access_policy.is_member(group, "m")
        assert not access_policy.is_member(group, "x")

    def test_pending_request_lookup(self):
        group = make_group(pending=["p"])
        assert access_policy.has_pending_request(group, "p")
        assert not access_policy.has_pending_request(group, "owner")

    @pytest.mark.parametrize("is_private,status,expected", [
        (False, ModerationStatus.approved, True),
        (False, ModerationStatus.pending, False),
        (False, ModerationStatus.rejected, False),
        (True, ModerationStatus.approved, False),
    ])
    def test_stranger_visibility(self, is_private, status, expected):
        group = make_group(is_private=is_private, status=status)
        assert access_policy.can_view_group(make_user("stranger"), group) is expected

    def test_members_and_admins_always_see(self):
        group = make_group(members=["m"], is_private=True)
        assert access_policy.can_view_group(make_user("m"), group)
        assert access_policy.can_view_group(make_user("owner"), group)
        assert access_policy.can_view_group(SITE_ADMIN, group)

    def test_update_and_delete(self):
        group = make_group(admins=["a"], members=["m"])
        assert access_policy.can_update_group(make_user("a"), group)
        assert not access_policy.can_update_group(make_user("m"), group)
        assert access_policy.can_update_group(SITE_ADMIN, group)

        assert access_policy.can_delete_group(make_user("owner"), group)
        assert not access_policy.can_delete_group(make_user("a"), group)
        assert access_policy.can_delete_group(SITE_ADMIN, group)

    def test_join_requests_and_roles(self):
        group = make_group(admins=["a"], members=["m"])
        assert access_policy.can_manage_join_requests(make_user("owner"), group)
        assert access_policy.can_manage_join_requests(make_user("a"), group)
        assert not access_policy.can_manage_join_requests(make_user("m"), group)

        assert access_policy.can_change_roles(make_user("owner"), group)
        assert not access_policy.can_change_roles(make_user("a"), group)

    def test_site_admin_has_no_group_role_powers(self):
        group = make_group()
        assert not access_policy.can_manage_join_requests(SITE_ADMIN, group)
        assert not access_policy.can_change_roles(SITE_ADMIN, group)
        assert not access_policy.can_remove_member(SITE_ADMIN, group, GroupRole.member)

    @pytest.mark.parametrize("actor,target,expected", [
        ("owner", GroupRole.member, True),
        ("owner", GroupRole.admin, True),
        ("owner", GroupRole.owner, False),
        ("a", GroupRole.member, True),
        ("a", GroupRole.admin, False),
        ("a", GroupRole.owner, False),
        ("m", GroupRole.member, False),
        ("x", GroupRole.member, False),
    ])
    def test_remove_member_matrix(self, actor, target, expected):
        group = make_group(admins=["a"], members=["m"])
        assert access_policy.can_remove_member(make_user(actor), group, target) is expected


class TestRecipePredicates:

    def test_author_and_admin_see_everything(self):
        recipe = make_recipe(is_private=True, status=ModerationStatus.rejected)
        assert access_policy.can_view_recipe(make_user("author"), recipe)
        assert access_policy.can_view_recipe(SITE_ADMIN, recipe)

    @pytest.mark.parametrize("status", [ModerationStatus.pending, ModerationStatus.rejected])
    def test_unapproved_hidden_from_others(self, status):
        recipe = make_recipe(status=status)
        assert not access_policy.can_view_recipe(make_user("reader"), recipe)

    def test_public_approved_recipe(self):
        assert access_policy.can_view_recipe(make_user("reader"), make_recipe())

    def test_private_recipe_needs_group_membership(self):
        recipe = make_recipe(group_id="g1", is_private=True)
        assert access_policy.can_view_recipe(make_user("insider", groups=["g1"]), recipe)
        assert not access_policy.can_view_recipe(make_user("outsider", groups=["g2"]), recipe)

    def test_private_recipe_without_group(self):
        recipe = make_recipe(is_private=True)
        assert not access_policy.can_view_recipe(make_user("reader", groups=["g1"]), recipe)

    def test_modify(self):
        recipe = make_recipe()
        assert access_policy.can_modify_recipe(make_user("author"), recipe)
        assert access_policy.can_modify_recipe(SITE_ADMIN, recipe)
        assert not access_policy.can_modify_recipe(make_user("reader"), recipe)

    def test_admin_has_no_list_filter(self):
        assert access_policy.visible_recipes_clause(SITE_ADMIN) is None
        assert access_policy.visible_groups_clause(SITE_ADMIN) is None
        assert access_policy.visible_recipes_clause(make_user("reader")) is not None
