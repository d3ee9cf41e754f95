"""Browser-based web UI for py-perms.

This package provides a Flask application that exposes the permission
engine through a browser.  It is an **optional** extra — install with::

    pip install py-perms[web]

The ``create_app`` factory in ``app.py`` builds a catalog session and
serves an HTML page plus a small JSON API for listing entries, chmod,
chown, umask and generated commands.
"""
