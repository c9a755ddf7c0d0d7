"""
HTTP Basic authentication against the `users` table.
"""
