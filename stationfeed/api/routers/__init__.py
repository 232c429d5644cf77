"""Endpoint groups mounted by :func:`stationfeed.api.app.create_app`."""
