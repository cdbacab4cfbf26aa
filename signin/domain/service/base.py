"""Base service class for domain services."""


class Service:
    """Base class for domain services.

    Services hold rules that span the repository and the User aggregate,
    such as email normalization and password hashing on account creation.
    """

    pass
