class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class InputLoadError(AppError):
    """Raised when the catalog inputs for a generation run cannot be read.

    Nothing has been mutated when this is raised; the section keeps its previous schedule.
    """
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=503, details=details)

class WriteError(AppError):
    """Raised when replacing a section's entries fails.

    Old entries are deleted before new ones are inserted, so the section may be left
    without a schedule. Regeneration should be retried.
    """
    def __init__(self, message: str, section_id: str, details: dict = None):
        merged = {"section_id": section_id, "schedule_may_be_empty": True}
        merged.update(details or {})
        super().__init__(message, status_code=500, details=merged)
        self.section_id = section_id

class GenerationInProgressError(AppError):
    """Raised when another generation run holds the institution-wide lock."""
    def __init__(self, timeout_seconds: float):
        super().__init__(
            f"Another timetable generation is in progress; gave up after {timeout_seconds:g}s",
            status_code=409,
            details={"timeout_seconds": timeout_seconds},
        )

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
