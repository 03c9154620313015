# Routes package init
"""
Cupcake Store — API Routes Package
===================================

Route Inventory:
    - cupcakes.py: GET/POST   /api/v1/cupcakes
                   GET/PUT/DELETE /api/v1/cupcakes/{id}
    - health.py:   GET /health

Routes stay thin: parse the request, call CupcakeService, pick the status
code. Business rules live in services; error formatting lives in the
global exception handlers.
"""
