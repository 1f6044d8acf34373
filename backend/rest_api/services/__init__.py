"""
Services module for business logic.

- domain/: Application services (accounts, tables, products, orders)
- crud/: Repository pattern
- base_service.py: BaseService / BaseCRUDService

Usage:
    from rest_api.services.domain import TableService
    service = TableService(db)
    tables = service.list_all()
"""
