class NotFoundError(ValueError):
    pass


class ConflictError(ValueError):
    pass


class AccessDeniedError(ValueError):
    pass


class ConcurrentModificationError(ValueError):
    pass
