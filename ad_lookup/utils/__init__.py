"""Small, side-effect free helpers.

Keep this package dependency-light to avoid circular imports.
"""

from .dn import extract_common_name  # noqa: F401
