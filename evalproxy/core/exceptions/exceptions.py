class AppError(Exception):
    """Base class for all application-level errors."""
    pass


class DomainError(AppError):
    """Base for domain logic errors."""
    pass

class InvalidCategoryError(DomainError):
    def __init__(self, category: str):
        self.category = category
        self.message = f"Invalid number ID '{category}'. Use p, f, e, or r."
        super().__init__(self.message)



class InfrastructureError(AppError):
    """Base for infrastructure-related errors (upstream API, etc)."""
    pass

class UpstreamError(InfrastructureError):
    """Any failure talking to the evaluation service."""
    def __init__(self, endpoint: str, detail: str = ""):
        self.endpoint = endpoint
        self.detail = detail
        self.message = f"Error with evaluation service '{endpoint}': {detail}"
        super().__init__(self.message)

class UpstreamTimeout(UpstreamError):
    pass

class UpstreamUnavailable(UpstreamError):
    def __init__(self, endpoint: str, detail: str = "", status_code: int = None):
        self.status_code = status_code
        super().__init__(endpoint, detail)

class MalformedResponse(UpstreamError):
    def __init__(self, endpoint: str, field: str):
        self.field = field
        super().__init__(endpoint, f"missing or malformed '{field}' field")
