"""
Error Taxonomy

Service-level exceptions mapped onto HTTP status codes. Handlers in the
app factory render them as {"success": false, "error": ...}.
"""


class DashboardError(Exception):
    status_code = 500

    def __init__(self, message, details=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        body = {"success": False, "error": self.message}
        if self.details:
            body.update(self.details)
        return body


class ValidationError(DashboardError):
    """Malformed or missing request fields"""
    status_code = 400


class NotFoundError(DashboardError):
    """No stored document for the requested key"""
    status_code = 404

    def __init__(self, message, hint=None, details=None):
        super().__init__(message, details=details)
        self.hint = hint

    def to_dict(self):
        body = super().to_dict()
        if self.hint:
            body["message"] = self.hint
        return body


class UpstreamError(DashboardError):
    """Store or AI provider failure"""
    status_code = 500

    def __init__(self, message, cause=None, details=None):
        super().__init__(message, details=details)
        self.cause = cause

    def to_dict(self, expose_cause=False):
        body = super().to_dict()
        if expose_cause and self.cause is not None:
            body["message"] = str(self.cause)
        return body
