# Services package init
"""
Bloglist Backend - Services Layer
==================================

What:  Business logic between routes (HTTP) and database (persistence).
How:   Services take the request's AsyncSession (and Identity where relevant)
       on every call; collaborators such as the password hasher and token
       codec are given to their constructors by create_app().

Service Inventory:
    - AccountStore:    credential store (accounts, account → posts links)
    - AccountService:  registration rules and account listing
    - SessionService:  login → signed session token
    - PostService:     post CRUD with ownership rules, statistics
    - stats:           pure aggregation functions over posts
"""
