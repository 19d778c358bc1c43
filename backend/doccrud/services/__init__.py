# Services package init
"""
DocCRUD Backend - Services Layer
=================================

What:  Sits between routes (HTTP) and the document store.
How:   Services receive their collection client at construction and are
       handed to routers by the app factory.

Service Inventory:
    - DocumentService: list/create/detail/replace/update/delete/keys over one
      collection, with store-error translation
"""
