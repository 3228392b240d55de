from .auth import verify_admin_password
from .audit import _log_admin_action
from .parsers import _parse_index, _parse_int_optional

__all__ = [
    "_log_admin_action",
    "_parse_index",
    "_parse_int_optional",
    "verify_admin_password",
]
