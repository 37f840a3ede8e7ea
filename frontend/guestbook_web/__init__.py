"""
Guestbook Web — Client Application Package
===========================================

What: Server-rendered single page that lists guestbook messages and posts
      new ones through the Guestbook API.

Layers:
    main.py        FastAPI app serving GET / and POST /
    page.py        GuestbookPage: form/list state and HTML rendering
    api_client.py  GuestbookClient: httpx calls to the API
"""

__version__ = "1.0.0"
