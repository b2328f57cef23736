"""
Casework Backend: API Routes
==============================

Route Inventory:
    - search.py:     GET  /api/search, /api/search/suggestions
    - vacations.py:  CRUD /api/vacations, POST /api/vacations/{id}/approve
    - cases.py:      GET  /api/cases/{id}/summary
    - helpers.py:    GET  /api/helpers/{id}/summary, helper documents
    - dashboard.py:  GET  /api/dashboard, /api/reports/monthly
    - invoices.py:   POST /api/invoices, GET /api/invoices/{id}
    - health.py:     GET  /health

Routes stay thin: read the request, call one service, return its result.
Errors raised by services are turned into JSON by the handlers in main.py.
"""
