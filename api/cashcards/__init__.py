"""
Cash card resource: owner-scoped CRUD over the `cash_cards` table.
"""
