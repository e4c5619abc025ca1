"""Remote reconciliation — push local posts to esa.io and fetch them back.

The remote copy is authoritative on fetch: local files are overwritten
without merging.
"""
