# Routes package init
"""
Letter Writer Backend — API Routes Package
============================================

Route Inventory:
    - auth.py:     /api/auth    Google sign-in, current user, OAuth reset
    - letters.py:  /api/letters letter CRUD and export to Google Docs
    - drive.py:    /api/drive   direct Google Drive access
    - health.py:   /health      liveness and database probe

Routes stay thin: they read the request, call a service, and shape the
response. Errors raised by services are turned into JSON bodies by the
handlers registered in main.py.
"""
