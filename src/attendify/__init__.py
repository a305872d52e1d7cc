"""ATTENDIFY backend package.

Feature modules (users, classes, attendance, requests, results) each carry a
thin Flask controller over service and repository layers. The geofence and
face matching logic live in ``geo`` and ``faces``.
"""
