"""
services/ - Business Logic Layer
================================
Billing arithmetic, the per-session subscription state, analytics,
notification scans and exports. Services receive repositories by
injection and return domain objects.
"""
