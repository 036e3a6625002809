"""
Community Forum Mini Program Client.

This package implements the client side of the community forum mini program:
- Gateway calls through the cloud hosting container with AUTH_REQUIRED detection
- Typed forum API wrappers and cloud storage uploads
- Registration with resume-after-registration of the interrupted call
- Page controllers for the community, detail, post, my-posts and profile pages
"""

__version__ = "0.1.0"
