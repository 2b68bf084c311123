"""
Wire vocabulary for cloudlet match rules.

Every value here is the literal string the Cloudlets API sends and accepts.
Model fields keep plain strings so that unknown values can still be decoded
and reported by validation; these enums are the allowed sets.
"""

from enum import Enum


class MatchRuleType(str, Enum):
    """Discriminator carried in the ``type`` field of every match rule."""

    PR = "cdMatchRule"  # Phased Release
    ER = "erMatchRule"  # Edge Redirector
    FR = "frMatchRule"  # Forward Rewrite
    AP = "apMatchRule"  # API Prioritization
    AS = "asMatchRule"  # Application Segmentation
    RC = "igMatchRule"  # Request Control


class ObjectMatchValueType(str, Enum):
    """Discriminator carried in the ``type`` field of an objectMatchValue."""

    SIMPLE = "simple"
    RANGE = "range"
    OBJECT = "object"


class MatchOperator(str, Enum):
    """Comparison applied by a match criteria."""

    CONTAINS = "contains"
    EXISTS = "exists"
    EQUALS = "equals"


class CheckIPs(str, Enum):
    """Where a clientip criteria looks for the address."""

    CONNECTING_IP = "CONNECTING_IP"
    XFF_HEADERS = "XFF_HEADERS"
    CONNECTING_IP_XFF_HEADERS = "CONNECTING_IP XFF_HEADERS"


class AllowDeny(str, Enum):
    """Request Control verdict."""

    ALLOW = "allow"
    DENY = "deny"
    DENY_BRANDED = "denybranded"


class UseRelativeURL(str, Enum):
    """How an Edge Redirector rule builds its Location header."""

    NONE = "none"
    COPY_SCHEME_HOSTNAME = "copy_scheme_hostname"
    RELATIVE_URL = "relative_url"


class MatchType(str, Enum):
    """What a match criteria inspects on the incoming request."""

    HEADER = "header"
    HOSTNAME = "hostname"
    PATH = "path"
    EXTENSION = "extension"
    QUERY = "query"
    REGEX = "regex"
    RANGE = "range"
    COOKIE = "cookie"
    DEVICE_CHARACTERISTICS = "deviceCharacteristics"
    CLIENT_IP = "clientip"
    CONTINENT = "continent"
    COUNTRY_CODE = "countrycode"
    REGION_CODE = "regioncode"
    PROTOCOL = "protocol"
    METHOD = "method"
    PROXY = "proxy"


# Redirect status codes an Edge Redirector rule may answer with
REDIRECT_STATUS_CODES = (301, 302, 303, 307, 308)
