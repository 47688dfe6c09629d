STATIC_URL = "/static/"
