"""Java naming conventions and literal escaping.

Controller grouping follows the endpoint name's verb prefix:

  createUser   -> CreateController.create
  updateUser   -> UpdateController.update
  deleteUser   -> DeleteController.delete
  queryUser    -> QueryController.query
  getUserById  -> QueryController.query
  syncAccounts -> SyncAccountsController.syncAccounts
"""

import math
import re
from decimal import Decimal

# (name prefix, controller class, method name); first match wins
_VERB_PREFIXES: tuple[tuple[str, str, str], ...] = (
    ("create", "CreateController", "create"),
    ("update", "UpdateController", "update"),
    ("delete", "DeleteController", "delete"),
    ("query", "QueryController", "query"),
    ("get", "QueryController", "query"),
)

JAVA_INT_MIN = -(2**31)
JAVA_INT_MAX = 2**31 - 1

JAVA_KEYWORDS = frozenset(
    "abstract assert boolean break byte case catch char class const continue default do double else "
    "enum extends final finally float for goto if implements import instanceof int interface long "
    "native new package private protected public return short static strictfp super switch "
    "synchronized this throw throws transient try void volatile while true false null".split()
)


def capitalize(name: str | None) -> str:
    if not name:
        return name or ""
    return name[0].upper() + name[1:]


def uncapitalize(name: str | None) -> str:
    if not name:
        return name or ""
    return name[0].lower() + name[1:]


def controller_class_name(api_name: str) -> str:
    ident = java_identifier(api_name)
    for prefix, class_name, _ in _VERB_PREFIXES:
        if ident.startswith(prefix):
            return class_name
    return capitalize(ident) + "Controller"


def method_name(api_name: str) -> str:
    ident = java_identifier(api_name)
    for prefix, _, name in _VERB_PREFIXES:
        if ident.startswith(prefix):
            return name
    return ident


def java_identifier(name: str | None) -> str:
    """Turn a wire name such as ``X-Request-Id`` into a Java identifier (``xRequestId``)."""
    parts = [p for p in re.split(r"[^A-Za-z0-9_$]+", name or "") if p]
    if not parts:
        return "value"
    ident = uncapitalize(parts[0]) + "".join(capitalize(p) for p in parts[1:])
    if ident[0].isdigit():
        ident = "_" + ident
    if ident in JAVA_KEYWORDS:
        ident += "_"
    return ident


def unified_class_name(base_package: str) -> str:
    """``com.example.order`` -> ``OrderApi``."""
    module = base_package.rsplit(".", 1)[-1]
    return capitalize(module) + "Api"


def package_path(package: str) -> str:
    return package.replace(".", "/")


def java_string(value) -> str:
    """Escape text for use inside a Java string literal (without the quotes)."""
    out = []
    for ch in str(value):
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out)


def javadoc(value) -> str:
    """Make text safe inside a ``/** ... */`` block."""
    return str(value).replace("*/", "*&#47;").replace("\r\n", " ").replace("\n", " ")


def is_integral(value: int | float) -> bool:
    if isinstance(value, int):
        return True
    return math.isfinite(value) and value.is_integer()


def long_literal(value: int | float) -> str:
    """Integral value as a Java int or long literal."""
    number = int(value)
    if JAVA_INT_MIN <= number <= JAVA_INT_MAX:
        return str(number)
    return f"{number}L"


def decimal_literal(value: float) -> str:
    """Non-integral value as the quoted string @DecimalMin/@DecimalMax expect."""
    return format(Decimal(repr(float(value))), "f")
