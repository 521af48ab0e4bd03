# Schemas package init
"""
Letter Writer Backend — API Schemas
=====================================

Pydantic models defining the JSON contract with the single-page app.
Field names are snake_case in Python and camelCase on the wire
(isDraft, googleDocId, redirectUrl, ...). Request bodies accept both.
"""
