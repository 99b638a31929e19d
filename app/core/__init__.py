"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps. Nothing in here knows
about threads, messages or listings.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Logger, transaction and storage-failure helpers

Exceptions (import from core.exceptions):
    - BaseApplicationError and its HTTP-mapped subclasses

Exception handling (import from core.exception_handlers):
    - api_exception_handler: DRF EXCEPTION_HANDLER for domain errors

Helpers (import from core.helpers):
    - validate_uuid / parse_uuid: UUID validation

Views (import from core.views):
    - health_check: Liveness/readiness endpoint
"""
