"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict, Optional
from flask import has_request_context, request


def get_user_identity(request_obj=None) -> Dict[str, Optional[str]]:
    """Extract client identity information from an HTTP or Socket.IO request."""
    if request_obj is None:
        if not has_request_context():
            return {'user_ip': 'system', 'sid': None}
        request_obj = request

    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'

    return {
        'user_ip': user_ip,
        'sid': getattr(request_obj, 'sid', None)
    }
