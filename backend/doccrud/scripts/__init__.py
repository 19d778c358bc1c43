# Scripts package init
"""
DocCRUD Backend - Deployment Scripts
=====================================

    - setup.py:    idempotently create the required collections (doccrud-setup)
    - teardown.py: drop them again (doccrud-teardown)
"""
