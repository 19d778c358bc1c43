# Routes package init
"""
DocCRUD Backend - API Routes Package
=====================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - resources.py: /people and /todo CRUD routers (built per resource)
    - entries.py:   /entries schema-less router
    - hello.py:     /hello-world, /hello/{name}, /sum
    - health.py:    /health

Routes stay thin: decode the request, call the service, set status code and
headers. Store access and error translation live in the services.
"""
