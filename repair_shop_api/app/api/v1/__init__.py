"""
Version 1 of the API.

Bundles the service ticket and inventory endpoints.  Breaking changes
should be introduced in a new version subpackage.
"""
