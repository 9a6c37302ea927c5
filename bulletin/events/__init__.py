"""
Event catalog support shared by the public listing, the admin pages and the
submission workflow: forms, the listing query builder and helpers.
"""
