from shoplists.modules.auth.deps import UserContext
from shoplists.modules.shopping.models import ShoppingList


def IsOwner(user: UserContext, shopping_list: ShoppingList) -> bool:
    # Admins get no extra access to other users' lists.
    return shopping_list.OwnerUserName == user.Username
