"""
Web-search enrichment for AI suggestions.

Responsibilities:
- Query the Serper search API for educational material on a topic.
- Return the first result's link and thumbnail, or nothing on failure.
"""
