from django.apps import AppConfig


class ExchangeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.exchange"
    label = "exchange"

    def ready(self) -> None:
        from modules.exchange.services import RateCache

        # One cache front per process so the refresh lock is shared by
        # every request served by this worker.
        self.rate_cache = RateCache()
