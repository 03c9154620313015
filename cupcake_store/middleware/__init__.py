# Middleware package init
"""
Cupcake Store — Middleware Package
===================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for every later log line
    2. Logging: method, path, status and duration of the request
    3. CORS: Starlette's CORSMiddleware (answers preflight requests)
"""
