from .decorators import require_auth, require_admin, get_current_user

from .audit import log_audit

from .parsing import (
    parse_date,
    parse_datetime,
    parse_int,
    get_json_body,
    require_fields,
    get_string,
    check_choice,
)

__all__ = [
    # Decorators
    "require_auth",
    "require_admin",
    "get_current_user",
    # Audit
    "log_audit",
    # Request parsing
    "parse_date",
    "parse_datetime",
    "parse_int",
    "get_json_body",
    "require_fields",
    "get_string",
    "check_choice",
]
