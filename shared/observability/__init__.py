from .setup import configure_logging, setup_observability
from .metrics import (
    storefront_checkout_total,
    storefront_checkout_duration_seconds,
    storefront_cart_mutations_total,
)
