"""
HTTP layer of the application.

``router`` aggregates the domain routers defined in ``endpoints``; it is
mounted under ``/api`` by ``create_app``.
"""
