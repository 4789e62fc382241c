"""
Admin panel endpoints.

Every route in this package depends on ``require_admin`` (role
``admin`` or ``super_admin``).
"""
