"""
Academic resource catalogue.

Responsibilities:
- Hold the resource catalogue and the per-user activity log in memory.
- Track views, downloads, likes and comments on each resource.
- Aggregate recent activity into trending and peer-based resource lists.
"""
