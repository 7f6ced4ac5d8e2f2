"""
Service-layer exception hierarchy.

Services raise these; ``permitpro.main`` registers one handler per type so
every router gets the same status codes and response shape::

    {"detail": "<message>", **details}
"""


class PermitProError(Exception):
    status_code = 500

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(PermitProError):
    """Missing or invalid input, e.g. an unknown permit type. Maps to 400."""

    status_code = 400


class NotFoundError(PermitProError):
    """A referenced package, contractor, subcontractor or template is missing.

    Maps to 404.
    """

    status_code = 404

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class ConflictError(PermitProError):
    """The operation collides with existing state. Maps to 409.

    ``details`` carries whatever the caller needs to fix the conflict, such
    as the packages still referencing a contractor.
    """

    status_code = 409
