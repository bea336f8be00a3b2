from .dishka_app import AdaptersProvider, GatewaysProvider, ServicesProvider
