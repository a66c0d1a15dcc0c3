# -*- coding: utf-8 -*-
"""
TOTP enrollment URI helpers.

Authenticator apps enroll an account by scanning a QR code that carries an
``otpauth://totp/ISSUER:ACCOUNT?secret=...&issuer=...&period=...`` URI.
"""

import re
from typing import Optional
from urllib.parse import quote, quote_plus

DEFAULT_PERIOD = 30

_INTEGER = re.compile(r'[+-]?[0-9]+')

# Sub-delimiters kept verbatim inside a path segment
_PATH_SEGMENT_SAFE = "$&+,:;=@"


def parse_period(value: Optional[str], default: int = DEFAULT_PERIOD) -> int:
    """
    Parse the TOTP period (seconds) submitted by the user.

    Only a plain decimal integer greater than zero overrides ``default``;
    empty, non-numeric, zero and negative values are ignored.
    """
    if not value or not _INTEGER.fullmatch(value):
        return default
    period = int(value)
    return period if period > 0 else default


def escape_path_segment(value: str) -> str:
    return quote(value, safe=_PATH_SEGMENT_SAFE)


def escape_query_value(value: str) -> str:
    return quote_plus(value, safe='')


def build_totp_uri(issuer: str, account: str, secret: str, period: int = DEFAULT_PERIOD) -> str:
    """
    Build the ``otpauth`` enrollment URI.

    Args:
        issuer (str): Service name shown in the authenticator app
        account (str): User/account name
        secret (str): Shared secret (normally base32)
        period (int): Code lifetime in seconds

    Returns:
        str: ``otpauth://totp/<issuer>:<account>?secret=<secret>&issuer=<issuer>&period=<period>``

    Raises:
        ValueError: If issuer, account or secret is empty

    Example:
        >>> build_totp_uri("My Co", "jane", "JBSWY3DPEHPK3PXP")
        'otpauth://totp/My%20Co:jane?secret=JBSWY3DPEHPK3PXP&issuer=My+Co&period=30'
    """
    if not issuer or not account or not secret:
        raise ValueError("Name, User, and Secret are required")

    label = f"{escape_path_segment(issuer)}:{escape_path_segment(account)}"
    query = (
        f"secret={escape_query_value(secret)}"
        f"&issuer={escape_query_value(issuer)}"
        f"&period={int(period)}"
    )
    return f"otpauth://totp/{label}?{query}"
