"""
Management command that runs the air quality monitor loop.
"""
import asyncio
import logging

from django.core.management.base import BaseCommand

from apps.core.constants import CHART_SECTION, PARTICLE_SECTION
from apps.core.credentials import CredentialStore
from apps.monitor.orchestrator import AirQualityMonitor

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Continuously acquire air quality data and drive the visualizations'

    def add_arguments(self, parser):
        parser.add_argument(
            '--once',
            action='store_true',
            help='Run a single acquisition cycle and exit',
        )
        parser.add_argument(
            '--no-input',
            action='store_false',
            dest='interactive',
            help='Do not prompt for an API key',
        )
        parser.add_argument(
            '--sections',
            default=f'{PARTICLE_SECTION},{CHART_SECTION}',
            help='Comma-separated sections to treat as visible (empty for none)',
        )
        parser.add_argument(
            '--no-probe',
            action='store_false',
            dest='probe',
            help='Assume connectivity instead of probing for it',
        )

    def handle(self, *args, **options):
        api_key = self.configure_api_key(options['interactive'])

        if api_key:
            self.stdout.write('Using OpenWeatherMap with your API key')
        else:
            self.stdout.write(self.style.WARNING('No API key: using keyless WAQI data'))

        sections = [s.strip() for s in options['sections'].split(',') if s.strip()]
        monitor = AirQualityMonitor(api_key=api_key, probe_connectivity=options['probe'])

        try:
            asyncio.run(monitor.run(visible_sections=sections, once=options['once']))
        except KeyboardInterrupt:
            self.stdout.write('\nStopped')
            return

        record = monitor.state.current_record
        if options['once'] and record is not None:
            self.stdout.write(self.style.SUCCESS(
                f"{record.place_label}: AQI {record.aqi} ({record.trend_label}), "
                f"health index {record.health_index}"
            ))
            for advice in record.recommendations:
                self.stdout.write(f"  - {advice}")
            for notice in monitor.state.notices:
                self.stdout.write(self.style.WARNING(f"  ! {notice.message}"))

    def configure_api_key(self, interactive):
        """
        Consult the credential store; prompt once if nothing is stored.

        A blank answer runs this session without a key and stores nothing.
        """
        store = CredentialStore()
        api_key = store.get()
        if api_key or not interactive:
            return api_key

        self.stdout.write('OpenWeatherMap API key (optional, get one at https://openweathermap.org/api)')
        try:
            entered = input('API key, or Enter for demo data: ').strip()
        except EOFError:
            entered = ''

        if entered:
            store.set(entered)
            return entered
        return None
