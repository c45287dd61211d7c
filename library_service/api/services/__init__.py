# This file marks the services package for API data-access and business logic modules.
# It exists so routers can depend on cohesive service classes instead of raw SQL.
