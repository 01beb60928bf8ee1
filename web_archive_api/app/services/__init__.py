"""
Service layer abstraction.

Services own the SQL for a domain.  API handlers call them with the
connection taken from the per-request context.
"""
