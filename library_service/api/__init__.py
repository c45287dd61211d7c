# This file marks the HTTP API package: app factory, routers, services, and schemas.
