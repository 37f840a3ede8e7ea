# Routes package init
"""
Guestbook API — Routes Package
===============================

Route Inventory:
    - health.py:    GET  /          (banner)
                    GET  /health    (health check)
    - messages.py:  GET  /messages  (list, newest first)
                    POST /messages  (create)

Routes stay thin: they read the request, call MessageService, and wrap the
result in the success envelope. Anything else is a 404 from the handlers in
main.py.
"""
