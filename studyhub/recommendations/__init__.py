"""
Smart recommendation engine.

Responsibilities:
- Build a ranking context from the user's semester, department and recent activity.
- Collect candidates concurrently from trending, AI, peer and study-path sources.
- Score and rank candidates using a fixed, tunable heuristic.
- Cache ranked results briefly per semester and department.
"""
