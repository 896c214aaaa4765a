"""Core Business Logic Module

This module provides the user-lifecycle logic of the backend, independent
of Flask.

Module Structure:
    - firebase/               : Firebase Auth, Firestore and Cloud Messaging gateways
    - provisioning_service.py : Create-or-update users with role and provenance
    - lifecycle_service.py    : Active/Inactive transitions, hugger flag, claims reset
    - notifications.py        : Audience resolution and push fan-out
    - container.py            : Services container built once at startup
    - schemas.py              : Typed request bodies
    - validators.py           : Field validation and temporary passwords
    - errors.py               : Error taxonomy with HTTP statuses

Usage Pattern:
    These modules are NOT auto-imported so scripts can load only what they use.

        from dailyhug.core.container import build_services
        from dailyhug.core.errors import ApiError
"""
