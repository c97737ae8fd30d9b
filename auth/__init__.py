"""
auth — User authentication module.

Provides:
  • JWT token creation & verification (``auth.jwt``)
  • Password hashing with bcrypt (``auth.password``)
  • The bearer-token guard (``auth.guard``)
  • ``get_current_user`` FastAPI dependency
"""
