from shoplists.modules.auth.deps import ADMIN_ROLE, UserContext


def IsAdmin(user: UserContext) -> bool:
    return user.Role == ADMIN_ROLE
