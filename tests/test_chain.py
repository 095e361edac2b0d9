import random

import pytest

from apps.adapters.base import BaseAdapter
from apps.adapters.chain import ChainResult, ProviderChain
from apps.adapters.models import AcquisitionLog, ProviderStatus
from apps.adapters.openweathermap import OpenWeatherMapAdapter
from apps.adapters.synthetic import SyntheticAdapter
from apps.core.exceptions import AllProvidersExhausted, ProviderError

from .helpers import FakeSession, StubAdapter, build_record, make_response


def synthetic():
    return SyntheticAdapter(rng=random.Random(7))


def track_status(settings):
    settings.AIR_QUALITY_SETTINGS = {**settings.AIR_QUALITY_SETTINGS, 'TRACK_PROVIDER_STATUS': True}


class TestProviderChain:

    def test_first_success_wins(self, location):
        primary = StubAdapter(record=build_record(aqi=80), code='PRIMARY')
        secondary = StubAdapter(record=build_record(aqi=120), code='SECONDARY')
        chain = ProviderChain([primary, secondary], fallback=synthetic())

        result = chain.acquire(location)

        assert result.record.aqi == 80
        assert result.provider == 'PRIMARY'
        assert result.attempted == ['PRIMARY']
        assert result.errors == []
        assert not result.used_fallback
        assert result.exhausted is None
        assert secondary.calls == 0

    def test_falls_through_to_next_provider(self, location):
        primary = StubAdapter(error=TimeoutError('slow'), code='PRIMARY')
        secondary = StubAdapter(record=build_record(aqi=120), code='SECONDARY')
        chain = ProviderChain([primary, secondary], fallback=synthetic())

        result = chain.acquire(location)

        assert result.record.aqi == 120
        assert result.provider == 'SECONDARY'
        assert result.attempted == ['PRIMARY', 'SECONDARY']
        assert [e.provider for e in result.errors] == ['PRIMARY']
        assert result.exhausted is None

    def test_every_provider_failing_yields_synthetic_record(self, location):
        primary = StubAdapter(error=TimeoutError('slow'), code='PRIMARY')
        secondary = StubAdapter(error=ValueError('bad status'), code='SECONDARY')
        chain = ProviderChain([primary, secondary], fallback=synthetic())

        result = chain.acquire(location)

        assert result.provider == 'SYNTHETIC'
        assert result.used_fallback
        assert result.attempted == ['PRIMARY', 'SECONDARY', 'SYNTHETIC']
        assert result.record.place_label == 'Pune'
        assert 100 <= result.record.aqi <= 139
        for value in result.record.pollutants().values():
            assert value > 0

        exhausted = result.exhausted
        assert isinstance(exhausted, AllProvidersExhausted)
        assert [e.provider for e in exhausted.errors] == ['PRIMARY', 'SECONDARY']

    def test_each_provider_is_tried_once(self, location):
        primary = StubAdapter(error=TimeoutError('slow'), code='PRIMARY')
        secondary = StubAdapter(error=TimeoutError('slow'), code='SECONDARY')
        chain = ProviderChain([primary, secondary], fallback=synthetic())

        chain.acquire(location)

        assert (primary.calls, secondary.calls) == (1, 1)

    def test_unexpected_exception_is_wrapped(self, location):
        broken = StubAdapter(record=build_record(), code='BROKEN')
        broken.fetch = lambda coordinate, place: 1 / 0
        chain = ProviderChain([broken], fallback=synthetic())

        result = chain.acquire(location)

        assert result.used_fallback
        assert isinstance(result.errors[0], ProviderError)
        assert isinstance(result.errors[0].cause, ZeroDivisionError)

    def test_provider_without_credential_is_skipped(self, location):
        session = FakeSession({})
        metered = OpenWeatherMapAdapter(api_key='', session=session)
        secondary = StubAdapter(record=build_record(aqi=64), code='SECONDARY')
        chain = ProviderChain([metered, secondary], fallback=synthetic())

        result = chain.acquire(location)

        assert result.provider == 'SECONDARY'
        assert result.attempted == ['SECONDARY']
        assert session.calls == []

    def test_no_providers_goes_straight_to_synthetic(self, location):
        chain = ProviderChain([], fallback=synthetic())

        result = chain.acquire(location)

        assert result.provider == 'SYNTHETIC'
        assert result.errors == []
        assert result.exhausted is not None

    def test_synthetic_in_provider_list_is_not_duplicated(self):
        chain = ProviderChain([StubAdapter(code='PRIMARY'), synthetic()], fallback=synthetic())

        assert chain.order == ['PRIMARY', 'SYNTHETIC']


class TestChainFromSettings:

    def test_no_credential_uses_keyless_provider(self):
        chain = ProviderChain.from_settings()

        assert chain.order == ['WAQI', 'SYNTHETIC']

    def test_credential_selects_metered_provider(self):
        chain = ProviderChain.from_settings(api_key='secret')

        assert chain.order == ['OPENWEATHERMAP', 'SYNTHETIC']
        assert chain.providers[0].api_key == 'secret'
        assert chain.providers[0].is_available()

    def test_providers_are_configurable(self, settings):
        settings.AIR_QUALITY_SETTINGS = {
            **settings.AIR_QUALITY_SETTINGS,
            'METERED_PROVIDER': 'WAQI',
        }

        chain = ProviderChain.from_settings(api_key='token')

        assert chain.order == ['WAQI', 'SYNTHETIC']
        assert chain.providers[0].api_key == 'token'

    def test_metered_failure_goes_straight_to_synthetic(self, monkeypatch, location):
        session = FakeSession({
            '/air_pollution': make_response({'cod': 500}, status_code=500),
            '/weather': make_response({'main': {'temp': 20}}),
            'feed/geo:': make_response({'status': 'ok', 'data': {'aqi': 42}}),
        })
        monkeypatch.setattr(BaseAdapter, '_create_session', lambda self: session)
        chain = ProviderChain.from_settings(api_key='KEY')

        result = chain.acquire(location)

        assert result.provider == 'SYNTHETIC'
        assert [e.provider for e in result.errors] == ['OPENWEATHERMAP']
        assert not [call for call in session.calls if 'waqi' in call['url']]


@pytest.mark.django_db
class TestAcquisitionTracking:

    def test_acquisition_is_logged(self, settings, location):
        track_status(settings)
        primary = StubAdapter(error=TimeoutError('slow'), code='PRIMARY')
        secondary = StubAdapter(record=build_record(aqi=120), code='SECONDARY')
        chain = ProviderChain([primary, secondary], fallback=synthetic())

        chain.acquire(location)

        log = AcquisitionLog.objects.get()
        assert log.provider_used == 'SECONDARY'
        assert log.providers_attempted == ['PRIMARY', 'SECONDARY']
        assert log.providers_failed == ['PRIMARY']
        assert log.error_details == {'PRIMARY': 'slow'}
        assert log.result_aqi == 120
        assert not log.used_fallback

    def test_provider_status_is_recorded(self, settings, location):
        track_status(settings)
        primary = StubAdapter(error=TimeoutError('slow'), code='PRIMARY')
        secondary = StubAdapter(record=build_record(aqi=120), code='SECONDARY')
        chain = ProviderChain([primary, secondary], fallback=synthetic())

        chain.acquire(location)
        chain.acquire(location)

        status = ProviderStatus.objects.get(source='SECONDARY')
        assert status.total_requests == 2
        assert status.total_failures == 0
        assert status.success_rate == 100
        assert status.is_healthy

    def test_nothing_written_when_tracking_is_off(self, location):
        chain = ProviderChain([StubAdapter(record=build_record())], fallback=synthetic())

        chain.acquire(location)

        assert AcquisitionLog.objects.count() == 0
        assert ProviderStatus.objects.count() == 0


def test_chain_result_defaults():
    result = ChainResult(record=build_record(), provider='WAQI')

    assert result.attempted == []
    assert result.exhausted is None
