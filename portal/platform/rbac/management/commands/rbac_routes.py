"""
Management command to list the guarded route table.
Run: python manage.py rbac_routes [--misconfigured]
"""

from django.core.management.base import BaseCommand
from django.urls import URLPattern, URLResolver, get_resolver

from portal.platform.rbac.routing import ROUTE_CONFIG_KWARG


def iter_route_configs(patterns, prefix=""):
    """Yield ``(full_pattern, RouteConfig)`` for every declared route."""
    for entry in patterns:
        if isinstance(entry, URLResolver):
            yield from iter_route_configs(entry.url_patterns, prefix + str(entry.pattern))
        elif isinstance(entry, URLPattern):
            config = entry.default_args.get(ROUTE_CONFIG_KWARG)
            if config is not None:
                yield prefix + str(entry.pattern), config


class Command(BaseCommand):
    help = 'List guarded routes with their checkpoints and permission requirements'

    def add_arguments(self, parser):
        parser.add_argument(
            '--misconfigured',
            action='store_true',
            help='Only list routes whose checkpoints have nothing declared to check',
        )

    def handle(self, *args, **options):
        only_misconfigured = options['misconfigured']
        routes = list(iter_route_configs(get_resolver().url_patterns))

        self.stdout.write(self.style.SUCCESS(f'Guarded routes: {len(routes)}'))

        misconfigured = 0
        for pattern, config in routes:
            if config.is_misconfigured:
                misconfigured += 1
            elif only_misconfigured:
                continue

            guards = ', '.join(guard.__name__ for guard in config.guards) or '-'
            required = ', '.join(config.required_tokens) or '-'
            mode = 'all' if config.require_all else 'any'

            self.stdout.write(f'  /{pattern}  [{config.name}]')
            self.stdout.write(f'    guards: {guards}')
            self.stdout.write(f'    requires ({mode}): {required}')
            if config.roles:
                self.stdout.write(f'    roles: {", ".join(config.roles)}')
            if config.redirect_to:
                self.stdout.write(f'    redirect: {config.redirect_to}')
            if config.is_misconfigured:
                self.stdout.write(self.style.WARNING(
                    f'    WARNING: {config.name} has a checkpoint without a requirement and allows every session'
                ))

        if misconfigured:
            self.stdout.write(self.style.WARNING(f'{misconfigured} misconfigured route(s)'))
        else:
            self.stdout.write(self.style.SUCCESS('No misconfigured routes'))
