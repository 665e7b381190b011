# storefront/api/__init__.py
from storefront.api.routers import admin, auth, cart, categories, checkout, health, orders, products, webhooks

ROUTERS = [
    health.router,
    auth.router,
    categories.router,
    products.router,
    cart.router,
    checkout.router,
    orders.router,
    webhooks.router,
    admin.router,
]
