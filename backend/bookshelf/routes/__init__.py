# Routes package init
"""
Bookshelf Backend — API Routes Package
========================================

What:  The route table: (method, path) → handler.

Route Inventory:
    - users.py:   GET    /users
                  POST   /users
                  POST   /users/login
                  GET    /users/{id}
                  PUT    /users/{id}
                  POST   /users/{id}/password
                  DELETE /users/{id}
    - books.py:   GET    /books
                  POST   /books
                  GET|PUT|DELETE /books/{id}   (501 until built)
    - health.py:  GET    /health

Design Principle:
    Routes are THIN. They extract path/query/body values, obtain a session,
    and call the controller. Validation and error mapping live elsewhere.
"""
