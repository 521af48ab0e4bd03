# Services package init
"""
Letter Writer Backend — Services Layer
========================================

What:  Business logic between routes (HTTP) and the database / Google APIs.
How:   Each service is a stateless class with a module-level singleton;
       database sessions are passed in per call.

Service Inventory:
    - SessionService: issue and verify session bearer tokens
    - GoogleAuthService: consent URL, code exchange, credentials, revocation
    - UserService: user upsert from Google sign-in, token clearing
    - LetterService: owner-scoped letter CRUD (authorize_letter_access)
    - CredentialService: stored Google token → valid credentials (one refresh)
    - DocsExportService: letter → new Google Doc
    - DriveService: upload / list / read Google Docs through Drive
"""
