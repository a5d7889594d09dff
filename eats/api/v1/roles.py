# eats/api/v1/roles.py
from typing import Dict, List, Optional, Sequence

from eats.models.user import User

ANY = "Any"

# Operation name -> roles allowed to run it. Operations missing here are
# public. ANY admits every authenticated user.
OPERATION_ROLES: Dict[str, List[str]] = {
    # users
    "me": [ANY],
    "user_profile": [ANY],
    "edit_profile": [ANY],
    # restaurants
    "create_restaurant": ["Owner"],
    "edit_restaurant": ["Owner"],
    "delete_restaurant": ["Owner"],
    "my_restaurants": ["Owner"],
    # dishes
    "create_dish": ["Owner"],
    "edit_dish": ["Owner"],
    "delete_dish": ["Owner"],
    # orders
    "create_order": ["Client"],
    "get_orders": [ANY],
    "get_order": [ANY],
    "edit_order": [ANY],
    "take_order": ["Delivery"],
    # subscriptions
    "pending_orders": ["Owner"],
    "cooked_orders": ["Delivery"],
    "order_updates": [ANY],
}


def can_activate(roles: Optional[Sequence[str]], user: Optional[User]) -> bool:
    """
    Decide whether a user may run an operation guarded by roles.

    Args:
        roles: Allowed roles, or None for a public operation
        user: Authenticated user, or None

    Returns:
        True if access is granted
    """
    if roles is None:
        return True

    if user is None:
        return False

    if ANY in roles:
        return True

    return user.role.value in roles
