"""HTTP API for the page replacement simulator.

This package provides a Flask application that runs simulations on
request.  It is an **optional** extra — install with::

    pip install pagesim[web]

The ``create_app`` factory in ``app.py`` serves three endpoints:

- ``GET /api/policies`` — the replacement policies on offer.
- ``POST /api/simulate`` — run one trace under one policy.
- ``POST /api/compare`` — run one trace under every policy.
"""
