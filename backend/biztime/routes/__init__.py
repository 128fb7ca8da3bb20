# Routes package init
"""
BizTime Backend — API Routes Package
=====================================

Route Inventory:
    - companies.py:  GET/POST /companies, GET/PUT/DELETE /companies/{code}
    - invoices.py:   GET/POST /invoices,  GET/PUT/DELETE /invoices/{id}
    - health.py:     GET /health

Routes are THIN: they read path and body parameters, call the matching
service, and return its response model. Failures are raised by services
and formatted by the exception handlers registered in main.py.
"""
