"""tokenauth: token-based authentication API.

Run the app with ``flask --app tokenauth.main run``.
"""
