"""
Bookshelf Backend — Controllers Package
=========================================

What:  Request handlers: validate input, call the services, build the
       response model or raise a typed error.

Controller Inventory:
    - users_controller.py: list, get, create, update, change password,
                           delete, login
    - books_controller.py: paged list, create, not-implemented by-id stub

Design Principle:
    Controllers know nothing about HTTP objects. They receive plain values
    and an AsyncSession, and report failures only by raising BookshelfError
    subclasses, which main.py turns into responses. Routes stay one-liners.
"""
