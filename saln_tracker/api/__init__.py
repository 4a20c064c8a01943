# JSON API routers
