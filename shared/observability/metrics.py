from prometheus_client import Counter, Histogram

# Business Metrics
storefront_checkout_total = Counter(
    "storefront_checkout_total",
    "Total checkouts processed",
    ["status"]  # Labels: 'success', 'failed'
)

storefront_checkout_duration_seconds = Histogram(
    "storefront_checkout_duration_seconds",
    "Checkout duration in seconds"
)

storefront_cart_mutations_total = Counter(
    "storefront_cart_mutations_total",
    "Cart mutations applied",
    ["action"]  # Labels: 'add', 'update', 'remove'
)
