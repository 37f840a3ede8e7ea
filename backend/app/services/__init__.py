# Services package init
"""
Guestbook API — Services Layer
===============================

Service Inventory:
    - MessageStore (abstract): persistence contract for Message rows
    - OrmMessageStore: structured SQLAlchemy implementation (used by the app)
    - SqlMessageStore: literal parameterized SQL implementation
    - MessageService: validation, trimming, store-failure mapping
"""
