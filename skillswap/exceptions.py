"""
Exceptions for the SkillSwap admin client
=========================================

Every failure that reaches a screen is one of these, so callers can tell a
server rejection from a dropped connection from a form that was never sent.

Usage:
    from skillswap.exceptions import APIError, ValidationError

    try:
        await screen.reply(message_id, text)
    except ValidationError as e:
        console.print(f"[yellow]{e.message}[/yellow]")
    except APIError as e:
        console.print(f"[red]{e.message}[/red]")
"""

from typing import Optional, Any, Dict


class SkillSwapError(Exception):
    """Base exception for all client errors"""

    def __init__(
        self,
        message: str,
        code: str = "CLIENT_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Transport / Server Errors
# ============================================

class APIError(SkillSwapError):
    """Backend answered with a non-2xx status"""

    def __init__(self, status_code: int, message: str, path: Optional[str] = None):
        details: Dict[str, Any] = {"status_code": status_code}
        if path:
            details["path"] = path
        super().__init__(message, code="API_ERROR", details=details)
        self.status_code = status_code


class NetworkError(SkillSwapError):
    """Request never got an HTTP answer (connection refused, timeout, reset)"""

    def __init__(self, message: str = "Cannot connect to server", path: Optional[str] = None):
        super().__init__(message, code="NETWORK_ERROR", details={"path": path} if path else {})


# ============================================
# Validation Errors (raised before any request)
# ============================================

class ValidationError(SkillSwapError):
    """Input rejected on the client side"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidFilterError(ValidationError):
    """Unknown filter field or a value the endpoint does not accept"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = "INVALID_FILTER"
