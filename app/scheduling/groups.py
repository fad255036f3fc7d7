"""Resolve the groups of a group type that can be auto-scheduled."""
import logging
from collections.abc import Callable
from uuid import UUID

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.models import Group, GroupType
from app.scheduling.errors import ConfigurationError

logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "yes", "t", "y", "1"}


def as_boolean(value: str | None) -> bool:
    """Interpret an attribute value as a boolean; unknown text is False."""
    if value is None:
        return False
    return value.strip().lower() in TRUE_VALUES


def resolve_eligible_groups(
    session: Session,
    group_type_id: UUID,
    attribute_key: str | None = None,
    predicate: Callable[[str | None], bool] = as_boolean,
) -> list[Group]:
    """
    Return the groups of a type that are eligible for auto-scheduling.

    A group is eligible when it is active, not archived, has a parent group,
    its group type has scheduling enabled and the group itself does not
    disable scheduling. When ``attribute_key`` is given, the group's value for
    that attribute must also pass ``predicate``; groups without a value are
    left out.

    Raises:
        ConfigurationError: ``group_type_id`` is not a known group type.
    """
    group_type = session.get(GroupType, group_type_id)
    if group_type is None:
        raise ConfigurationError(f"Group type '{group_type_id}' could not be found")

    statement = (
        select(Group)
        .join(GroupType, Group.group_type_id == GroupType.id)
        .where(Group.group_type_id == group_type.id)
        .where(Group.is_active == True)  # noqa: E712
        .where(Group.is_archived == False)  # noqa: E712
        .where(Group.parent_group_id.is_not(None))
        .where(GroupType.is_scheduling_enabled == True)  # noqa: E712
        .where(Group.disable_scheduling == False)  # noqa: E712
        .options(selectinload(Group.attribute_values))
        .order_by(Group.name)
    )
    groups = list(session.exec(statement).all())

    if attribute_key and attribute_key.strip():
        key = attribute_key.strip()
        groups = [group for group in groups if predicate(group.get_attribute_value(key))]

    logger.debug(f"{len(groups)} eligible groups for group type {group_type.name}")
    return groups
