# Services package init
"""
Bookshelf Backend — Services Layer
====================================

What:  Persistence and password primitives used by the controllers.
How:   Services take the request's AsyncSession and return records, None or
       True/False. Deciding which failure the client sees is the
       controllers' job.

Service Inventory:
    - password: bcrypt hashing and verification, run off the event loop
    - validation: Rule + validate(), the ordered first-failure-wins chain
    - UsersService: user lookups and writes
    - BooksService: paged book listing and creation
"""
