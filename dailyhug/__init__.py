"""Daily Hug backend package.

To use the Flask app:
    from dailyhug.flask_app import create_app

To use the Firebase gateways:
    from dailyhug.core.firebase import FirebaseClient, IdentityGateway, ProfileStore

To use the provisioning workflow:
    from dailyhug.core.provisioning_service import ProvisioningService
"""
# Note: flask_app is not imported here so scripts/provision.py can use
# dailyhug.core without building the HTTP layer.
