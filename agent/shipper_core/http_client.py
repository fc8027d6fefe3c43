"""
HTTP session with connection pooling and bounded automatic retry.

Retries cover connection errors and 502/503/504 inside a single send. They
are kept small so one flush cycle never outlives the batch interval; the
queue itself is the long-term retry mechanism.
"""

import os
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import DEFAULT_MAX_RETRIES


def _retry_strategy(total):
    return Retry(
        total=total,
        backoff_factor=0.5,                     # Wait 0.5s, 1s between retries
        status_forcelist=[502, 503, 504],
        allowed_methods=["POST"],
        raise_on_status=False,                  # Hand the last response back, no MaxRetryError
    )


def _get_ca_bundle():
    """CA bundle from REQUESTS_CA_BUNDLE / SSL_CERT_FILE, else requests' default."""
    env_ca = os.environ.get('REQUESTS_CA_BUNDLE') or os.environ.get('SSL_CERT_FILE')
    if env_ca and os.path.isfile(env_ca):
        return env_ca
    return True


def create_session(max_retries=DEFAULT_MAX_RETRIES):
    """Create a new requests.Session with connection pooling, retry, and SSL."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=2,
        max_retries=_retry_strategy(max_retries),
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = _get_ca_bundle()
    return session


def reset_session(session, max_retries=DEFAULT_MAX_RETRIES):
    """Close and recreate the HTTP session (fixes stale connections)."""
    try:
        session.close()
    except Exception:
        pass
    return create_session(max_retries)
