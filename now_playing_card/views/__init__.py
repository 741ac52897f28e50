"""View rendering module for HTML templates.

Views prepare context data and render Jinja2 templates, separate from the
API routers.
"""
