"""appshelf: app-store repository registry and clone synchronization.

See :mod:`appshelf.registry` for the URL registry and :mod:`appshelf.sync` for
clone management. :func:`appshelf.factory.build_appshelf` wires both from the
environment.
"""
