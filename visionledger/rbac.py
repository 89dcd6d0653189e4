"""Role-based access control: roles, custom grants and revokes, delegations and ACL groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from visionledger.env import Env

TTL_THRESHOLD = 5_184_000
TTL_EXTEND_TO = 10_368_000


class Permission(IntEnum):
    READ_ANY_RECORD = 1
    WRITE_RECORD = 2
    MANAGE_ACCESS = 3
    MANAGE_USERS = 4
    SYSTEM_ADMIN = 5


class Role(IntEnum):
    PATIENT = 1
    STAFF = 2
    OPTOMETRIST = 3
    OPHTHALMOLOGIST = 4
    ADMIN = 5


class AssignmentNotFoundError(LookupError):
    """Raised when a user has no active role assignment."""


class GroupNotFoundError(LookupError):
    """Raised when an ACL group does not exist."""


@dataclass
class AclGroup:
    name: str
    permissions: list[Permission] = field(default_factory=list)


@dataclass
class RoleAssignment:
    role: Role
    custom_grants: list[Permission] = field(default_factory=list)
    custom_revokes: list[Permission] = field(default_factory=list)
    expires_at: int = 0  # 0 means never expires


@dataclass
class Delegation:
    delegator: str
    delegatee: str
    role: Role
    expires_at: int = 0  # 0 means never expires


def _assignment_key(user: str) -> tuple[str, str]:
    return ("ROLE_ASN", user)


def _delegation_key(delegator: str, delegatee: str) -> tuple[str, str, str]:
    return ("DELEGATE", delegator, delegatee)


def _group_key(name: str) -> tuple[str, str]:
    return ("ACL_GRP", name)


def _user_groups_key(user: str) -> tuple[str, str]:
    return ("USR_GRPS", user)


def _delegatee_index_key(delegatee: str) -> tuple[str, str]:
    return ("DEL_IDX", delegatee)


def _is_live(expires_at: int, now: int) -> bool:
    return expires_at == 0 or expires_at > now


def _store(env: Env, key: tuple, value: object) -> None:
    env.persistent.set(key, value)
    env.persistent.extend_ttl(key, TTL_THRESHOLD, TTL_EXTEND_TO)


def base_permissions(role: Role) -> list[Permission]:
    """Return the permissions a role carries by itself."""
    perms: list[Permission] = []
    if role == Role.ADMIN:
        perms.append(Permission.SYSTEM_ADMIN)
    if role in (Role.ADMIN, Role.OPHTHALMOLOGIST, Role.OPTOMETRIST, Role.STAFF):
        perms.append(Permission.MANAGE_USERS)
    if role in (Role.ADMIN, Role.OPHTHALMOLOGIST, Role.OPTOMETRIST):
        perms.extend(
            (Permission.WRITE_RECORD, Permission.MANAGE_ACCESS, Permission.READ_ANY_RECORD)
        )
    return perms


def assign_role(env: Env, user: str, role: Role, expires_at: int) -> None:
    """Give ``user`` a fresh assignment of ``role``, clearing custom grants and revokes."""
    _store(env, _assignment_key(user), RoleAssignment(role=role, expires_at=expires_at))


def get_active_assignment(env: Env, user: str) -> RoleAssignment | None:
    """Return the user's assignment unless it is missing or expired."""
    assignment = env.persistent.get(_assignment_key(user))
    if assignment is not None and _is_live(assignment.expires_at, env.timestamp):
        return assignment
    return None


def _require_assignment(env: Env, user: str) -> RoleAssignment:
    assignment = get_active_assignment(env, user)
    if assignment is None:
        raise AssignmentNotFoundError(user)
    return assignment


def grant_custom_permission(env: Env, user: str, permission: Permission) -> None:
    """Grant ``permission`` to ``user`` on top of the role, lifting any revoke."""
    assignment = _require_assignment(env, user)
    assignment.custom_revokes = [p for p in assignment.custom_revokes if p != permission]
    if permission not in assignment.custom_grants:
        assignment.custom_grants.append(permission)
    _store(env, _assignment_key(user), assignment)


def revoke_custom_permission(env: Env, user: str, permission: Permission) -> None:
    """Revoke ``permission`` from ``user``, overriding role and grants."""
    assignment = _require_assignment(env, user)
    assignment.custom_grants = [p for p in assignment.custom_grants if p != permission]
    if permission not in assignment.custom_revokes:
        assignment.custom_revokes.append(permission)
    _store(env, _assignment_key(user), assignment)


def delegate_role(
    env: Env, delegator: str, delegatee: str, role: Role, expires_at: int
) -> None:
    """Delegate ``role`` from ``delegator`` to ``delegatee`` and index the delegator."""
    delegation = Delegation(
        delegator=delegator, delegatee=delegatee, role=role, expires_at=expires_at
    )
    _store(env, _delegation_key(delegator, delegatee), delegation)

    index_key = _delegatee_index_key(delegatee)
    delegators: list[str] = env.persistent.get(index_key, [])
    if delegator not in delegators:
        delegators.append(delegator)
    _store(env, index_key, delegators)


def get_active_delegation(env: Env, delegator: str, delegatee: str) -> Delegation | None:
    """Return the delegation between the two parties unless missing or expired."""
    delegation = env.persistent.get(_delegation_key(delegator, delegatee))
    if delegation is not None and _is_live(delegation.expires_at, env.timestamp):
        return delegation
    return None


def get_delegators(env: Env, delegatee: str) -> list[str]:
    """Return every address that has ever delegated to ``delegatee``."""
    return env.persistent.get(_delegatee_index_key(delegatee), [])


def create_group(env: Env, name: str, permissions: list[Permission]) -> None:
    env.persistent.set(_group_key(name), AclGroup(name=name, permissions=list(permissions)))


def delete_group(env: Env, name: str) -> None:
    env.persistent.remove(_group_key(name))


def add_to_group(env: Env, user: str, group_name: str) -> None:
    """Add ``user`` to an existing group."""
    if not env.persistent.has(_group_key(group_name)):
        raise GroupNotFoundError(group_name)
    groups: list[str] = env.persistent.get(_user_groups_key(user), [])
    if group_name not in groups:
        groups.append(group_name)
        env.persistent.set(_user_groups_key(user), groups)


def remove_from_group(env: Env, user: str, group_name: str) -> None:
    groups: list[str] = env.persistent.get(_user_groups_key(user), [])
    env.persistent.set(_user_groups_key(user), [g for g in groups if g != group_name])


def get_user_groups(env: Env, user: str) -> list[str]:
    return env.persistent.get(_user_groups_key(user), [])


def get_group_permissions(env: Env, name: str) -> list[Permission]:
    group = env.persistent.get(_group_key(name))
    return group.permissions if group is not None else []


def has_permission(env: Env, user: str, permission: Permission) -> bool:
    """Decide from role, custom grants and revokes, and group membership.

    An explicit revoke wins over everything else.
    """
    assignment = get_active_assignment(env, user)
    if assignment is not None:
        if permission in assignment.custom_revokes:
            return False
        if permission in assignment.custom_grants:
            return True
        if permission in base_permissions(assignment.role):
            return True

    return any(
        permission in get_group_permissions(env, group)
        for group in get_user_groups(env, user)
    )


def has_delegated_permission(
    env: Env, delegator: str, delegatee: str, permission: Permission
) -> bool:
    """Whether ``delegatee`` holds ``permission`` through a delegation from ``delegator``."""
    delegation = get_active_delegation(env, delegator, delegatee)
    return delegation is not None and permission in base_permissions(delegation.role)