"""Test doubles shared across the test modules."""
import threading
from unittest.mock import Mock

import requests
from django.utils import timezone

from apps.adapters.base import BaseAdapter
from apps.core.exceptions import ProviderError
from apps.core.records import AirQualityRecord, RawReading


def make_response(payload=None, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


class FakeSession:
    """
    Stand-in for requests.Session. Routes by URL substring; a route value
    may be a response or an exception to raise.
    """

    def __init__(self, routes):
        self.routes = routes
        self.calls = []
        self._lock = threading.Lock()

    def request(self, method, url, params=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append({'method': method, 'url': url, 'params': dict(params or {})})
        for fragment, outcome in self.routes.items():
            if fragment in url:
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise AssertionError(f"Unexpected request to {url}")


class StubAdapter(BaseAdapter):
    """Provider with a canned outcome and a call counter."""

    SOURCE_NAME = "Stub"
    SOURCE_CODE = "STUB"
    REQUIRES_API_KEY = False

    def __init__(self, record=None, error=None, gate=None, code=None):
        super().__init__()
        self.record = record
        self.error = error
        self.gate = gate
        self.calls = 0
        if code:
            self.SOURCE_CODE = code

    def fetch(self, coordinate, place):
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(5)
        if self.error is not None:
            raise ProviderError(self.SOURCE_CODE, self.error)
        return RawReading(source=self.SOURCE_CODE, payload={})

    def normalize_data(self, raw):
        return self.record


class StubResolver:
    def __init__(self, location):
        self.location = location
        self.calls = 0

    def resolve(self):
        self.calls += 1
        return self.location


def build_record(**overrides):
    values = {
        'aqi': 42,
        'pm25': 10,
        'pm10': 20,
        'o3': 30,
        'no2': 15,
        'so2': 5,
        'co': 1,
        'temperature': 24,
        'humidity': 55,
        'place_label': 'Pune, IN',
        'captured_at': timezone.now(),
    }
    values.update(overrides)
    return AirQualityRecord(**values)


