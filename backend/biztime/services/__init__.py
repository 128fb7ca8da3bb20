# Services package init
"""
BizTime Backend — Services Layer
=================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - CompanyService: company CRUD, slug derivation, invoice id lookup
    - InvoiceService: invoice CRUD, company join, paid/paid_date transitions

Both are stateless singletons; each call receives the request's AsyncSession.
"""
