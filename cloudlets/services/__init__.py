"""
Resource services for the Cloudlets SDK.

Each service wraps one API resource on top of a shared Session.
"""

from cloudlets.services.policy_versions import PolicyVersions

__all__ = ["PolicyVersions"]
