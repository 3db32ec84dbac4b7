"""
Repository layer.

Repositories hold the query logic; they flush but never commit
(see speculum.database.get_db).
"""
