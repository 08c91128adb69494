"""
auth — User authentication module.

Provides:
  • Session token creation & verification (HS256 JWT)
  • Password hashing (bcrypt)
  • Teacher delegation codes
  • Register / Login / Teacher login API routes
  • ``get_current_identity`` FastAPI dependency
"""
