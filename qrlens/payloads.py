# -*- coding: utf-8 -*-
"""
QR Payload Classification Module

This module turns the raw text recovered from a QR symbol into a structured,
human-readable description. It recognizes a small, fixed set of payload
conventions (WiFi credentials, vCard contacts, tel/sms/mailto/geo URIs and
http(s) URLs) and extracts an ordered list of labeled fields for each.

Classification never fails: anything that is not recognized, or that is
recognized by its prefix but is structurally broken, degrades to the plain
``text`` category with no fields.

Functions:
    classify: Classify a decoded payload
    extract_wifi, extract_vcard, extract_phone, extract_sms,
    extract_email, extract_geo, extract_url: Per-category field extraction
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote, unquote_plus, urlsplit


class Category(str, Enum):
    """Payload categories, in no particular order (see RULES for priority)."""

    WIFI = 'wifi'
    VCARD = 'vcard'
    PHONE = 'phone'
    SMS = 'sms'
    EMAIL = 'email'
    GEO = 'geo'
    URL = 'url'
    TEXT = 'text'


# Value of the leading "Type" field for every recognized category
CATEGORY_NAMES = {
    Category.WIFI: 'WiFi Network',
    Category.VCARD: 'vCard/Contact',
    Category.PHONE: 'Phone Number',
    Category.SMS: 'SMS',
    Category.EMAIL: 'Email',
    Category.GEO: 'Location',
    Category.URL: 'URL',
}

# Field labels
LABEL_TYPE = 'Type'
LABEL_SSID = 'Network Name (SSID)'
LABEL_SECURITY = 'Security Type'
LABEL_PASSWORD = 'Password'
LABEL_HIDDEN = 'Hidden Network'
LABEL_FULL_NAME = 'Full Name'
LABEL_PHONE = 'Phone'
LABEL_EMAIL = 'Email'
LABEL_ORGANIZATION = 'Organization'
LABEL_TITLE = 'Title'
LABEL_NUMBER = 'Number'
LABEL_MESSAGE = 'Message'
LABEL_ADDRESS = 'Address'
LABEL_SUBJECT = 'Subject'
LABEL_BODY = 'Body'
LABEL_LATITUDE = 'Latitude'
LABEL_LONGITUDE = 'Longitude'
LABEL_PROTOCOL = 'Protocol'
LABEL_HOST = 'Host'
LABEL_PATH = 'Path'
LABEL_QUERY = 'Query'


@dataclass(frozen=True)
class Field:
    label: str
    value: str


@dataclass(frozen=True)
class ClassificationResult:
    category: Category
    fields: Tuple[Field, ...] = ()

    @property
    def is_structured(self) -> bool:
        return self.category is not Category.TEXT


Extractor = Callable[[str], Optional[List[Field]]]
Predicate = Callable[[str], bool]


# A '%' not followed by two hex digits
_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')

_WIFI_FIELDS = (
    (re.compile(r'S:([^;]*)'), LABEL_SSID),
    (re.compile(r'T:([^;]*)'), LABEL_SECURITY),
    (re.compile(r'P:([^;]*)'), LABEL_PASSWORD),
)
_WIFI_HIDDEN = re.compile(r'H:([^;]*)')

_SMS_PREFIX = re.compile(r'^(sms|smsto):', re.IGNORECASE)
_SMS_BODY = re.compile(r'body=([^&]*)', re.IGNORECASE)

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')
# Characters not allowed in a URL authority
_BAD_AUTHORITY = re.compile(r'[\s<>"{}|\\^`]')


def _has_prefix(prefix: str, ignore_case: bool = False) -> Predicate:
    if ignore_case:
        prefix = prefix.lower()
        return lambda text: text.lower().startswith(prefix)
    return lambda text: text.startswith(prefix)


def _has_any_prefix(*prefixes: str) -> Predicate:
    lowered = tuple(p.lower() for p in prefixes)
    return lambda text: text.lower().startswith(lowered)


def _strict_unquote(value: str, plus_as_space: bool = False) -> Optional[str]:
    """Percent-decode ``value``; None if it holds a malformed escape."""
    if _BAD_ESCAPE.search(value):
        return None
    return unquote_plus(value) if plus_as_space else unquote(value)


def extract_wifi(text: str) -> List[Field]:
    """
    Extract fields from a ``WIFI:S:<ssid>;T:<type>;P:<password>;H:<hidden>;;``
    payload.

    Each key is looked up independently, so fields come out in S, T, P, H
    order no matter how the payload orders them. A missing key produces no
    field; a key with nothing after it produces an empty value.
    """
    body = text[len('WIFI:'):]
    fields = []
    for pattern, label in _WIFI_FIELDS:
        match = pattern.search(body)
        if match:
            fields.append(Field(label, match.group(1)))

    hidden = _WIFI_HIDDEN.search(body)
    if hidden and hidden.group(1).lower() == 'true':
        fields.append(Field(LABEL_HIDDEN, 'Yes'))
    return fields


def extract_vcard(text: str) -> List[Field]:
    """Extract contact fields line by line, keeping input order."""
    fields = []
    for line in text.split('\n'):
        line = line.strip()
        if line.startswith('FN:'):
            fields.append(Field(LABEL_FULL_NAME, line[3:]))
        elif line.startswith('TEL') and ':' in line:
            # TEL:..., TEL;TYPE=CELL:...
            fields.append(Field(LABEL_PHONE, line.split(':', 1)[1]))
        elif line.startswith('EMAIL') and ':' in line:
            fields.append(Field(LABEL_EMAIL, line.split(':', 1)[1]))
        elif line.startswith('ORG:'):
            fields.append(Field(LABEL_ORGANIZATION, line[4:]))
        elif line.startswith('TITLE:'):
            fields.append(Field(LABEL_TITLE, line[6:]))
    return fields


def extract_phone(text: str) -> List[Field]:
    return [Field(LABEL_NUMBER, text[4:])]


def extract_sms(text: str) -> List[Field]:
    """
    Extract the number and optional message of an ``sms:`` / ``smsto:`` URI.

    The message comes from the first ``body=`` parameter (case-insensitive)
    and is percent-decoded; a body with a malformed escape is dropped rather
    than shown undecoded.
    """
    rest = _SMS_PREFIX.sub('', text, count=1)
    number, sep, query = rest.partition('?')
    fields = [Field(LABEL_NUMBER, number)]
    if sep:
        match = _SMS_BODY.search(query)
        if match:
            message = _strict_unquote(match.group(1), plus_as_space=True)
            if message is not None:
                fields.append(Field(LABEL_MESSAGE, message))
    return fields


def _parse_query(query: str) -> Dict[str, str]:
    """
    Decode ``a=1&b=2`` pairs, keeping the first value of each key.

    Pairs whose key or value holds a malformed escape are skipped.
    """
    params = {}
    for pair in query.split('&'):
        if not pair:
            continue
        key, _, value = pair.partition('=')
        key = _strict_unquote(key, plus_as_space=True)
        value = _strict_unquote(value, plus_as_space=True)
        if key is None or value is None:
            continue
        params.setdefault(key, value)
    return params


def extract_email(text: str) -> List[Field]:
    address, sep, query = text[len('mailto:'):].partition('?')
    fields = [Field(LABEL_ADDRESS, address)]
    if sep:
        params = _parse_query(query)
        if params.get('subject'):
            fields.append(Field(LABEL_SUBJECT, params['subject']))
        if params.get('body'):
            fields.append(Field(LABEL_BODY, params['body']))
    return fields


def extract_geo(text: str) -> Optional[List[Field]]:
    """``geo:<lat>,<lon>[?...]``; None when there is no comma."""
    latitude, sep, rest = text[len('geo:'):].partition(',')
    if not sep:
        return None
    longitude = rest.split('?', 1)[0]
    return [Field(LABEL_LATITUDE, latitude), Field(LABEL_LONGITUDE, longitude)]


def extract_url(text: str) -> Optional[List[Field]]:
    """
    Break an http(s) URL into protocol, host, path and query.

    Returns None when the URL is not structurally valid: control characters,
    no authority, unbalanced IPv6 brackets, a bad port, stray characters in
    the authority or malformed percent escapes in the authority, path or
    fragment.
    """
    # urlsplit silently drops tabs and newlines
    if _CONTROL_CHARS.search(text):
        return None
    try:
        parts = urlsplit(text)
        parts.port  # ValueError for non-numeric or out-of-range ports
    except ValueError:
        return None

    host = parts.netloc.rpartition('@')[2]
    if not host or _BAD_AUTHORITY.search(parts.netloc) or _BAD_ESCAPE.search(parts.netloc):
        return None

    path = _strict_unquote(parts.path)
    if path is None or _BAD_ESCAPE.search(parts.fragment):
        return None

    fields = [
        Field(LABEL_PROTOCOL, parts.scheme),
        Field(LABEL_HOST, host),
    ]
    if path and path != '/':
        fields.append(Field(LABEL_PATH, path))
    if parts.query:
        fields.append(Field(LABEL_QUERY, parts.query))
    return fields


# Priority order: the first rule whose predicate matches owns the payload.
RULES: Tuple[Tuple[Category, Predicate, Extractor], ...] = (
    (Category.WIFI, _has_prefix('WIFI:'), extract_wifi),
    (Category.VCARD, _has_prefix('BEGIN:VCARD'), extract_vcard),
    (Category.PHONE, _has_prefix('tel:', ignore_case=True), extract_phone),
    (Category.SMS, _has_any_prefix('sms:', 'smsto:'), extract_sms),
    (Category.EMAIL, _has_prefix('mailto:', ignore_case=True), extract_email),
    (Category.GEO, _has_prefix('geo:', ignore_case=True), extract_geo),
    (Category.URL, _has_any_prefix('http://', 'https://'), extract_url),
)


def classify(text: str) -> ClassificationResult:
    """
    Classify a decoded QR payload.

    Rules are tried in ``RULES`` order. The first rule whose prefix matches
    decides the outcome: if its extractor returns fields, the result carries
    that category with a leading ``Type`` field; if the extractor reports a
    structural failure (None), the payload is plain text. No later rule is
    consulted in either case.

    Args:
        text (str): Raw payload as decoded from the QR symbol

    Returns:
        ClassificationResult: Category plus ordered fields. The ``text``
            category always has an empty field tuple.

    Example:
        >>> result = classify("tel:+15551234567")
        >>> result.category
        <Category.PHONE: 'phone'>
        >>> [(f.label, f.value) for f in result.fields]
        [('Type', 'Phone Number'), ('Number', '+15551234567')]
    """
    for category, matches, extract in RULES:
        if not matches(text):
            continue
        fields = extract(text)
        if fields is None:
            break
        return ClassificationResult(
            category=category,
            fields=(Field(LABEL_TYPE, CATEGORY_NAMES[category]),) + tuple(fields),
        )
    return ClassificationResult(category=Category.TEXT)
