"""Org/User service API client package.

To call the service with typed resources:
    from orgapi.core.orgs import OrgClient
    from orgapi.core.users import UserClient

To build authenticated calls by hand:
    from orgapi.core.httpclient import HttpClient, ApiClient, CallContext

To load configuration:
    from orgapi.config import load_settings
"""
# Note: We don't import orgapi.api by default so that importing orgapi.core
# never pulls in Flask
