"""
Bakery Orders service.

A small FastAPI backend that stores bakery orders in a relational ``orders``
table and exposes create, list, replace, delete and status-update endpoints.
"""
