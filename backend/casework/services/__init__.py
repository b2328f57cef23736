"""
Casework Backend: Services Layer
==================================

What:  Business logic between the routes (HTTP) and the database.
How:   Each service is a class with a module-level singleton. Services load
       rows, hand plain values to casework.core and build response schemas.
       They flush; the request's session dependency commits.

Service Inventory:
    - SearchService:    global search across all categories, suggestions
    - VacationService:  vacation CRUD with date and overlap validation
    - StatsService:     case/helper summaries, dashboard, monthly report
    - DocumentService:  helper document upload, storage, download, delete
    - InvoiceService:   invoice numbering and creation
"""
