# Routes package init
"""
Bloglist Backend - API Routes Package
======================================

Route Inventory:
    - users.py:   POST /api/login            (credentials → session token)
                  POST /api/users            (register)
                  GET  /api/users            (accounts with their posts)
    - posts.py:   GET  /api/posts            (list, X-Total-Count)
                  GET  /api/posts/stats      (aggregations)
                  GET/PUT/DELETE /api/posts/{id}
                  POST /api/posts            (create, identity required)
    - health.py:  GET  /health

Routes stay thin: parse the request, call a service, shape the response.
"""
