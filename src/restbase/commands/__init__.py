"""Built-in CLI sub-commands for restbase.

* :mod:`~restbase.commands.requests` -- ``get``, ``post``, ``put`` and
  ``delete`` against the active profile.
* :mod:`~restbase.commands.profile` -- create, list, inspect and remove
  API profiles.
* :mod:`~restbase.commands.cache` -- inspect and empty a profile's
  response cache.
* :mod:`~restbase.commands.config` -- view and modify global settings.

Request commands are plain callbacks registered on the root app; the
others are :class:`typer.Typer` sub-applications.
"""
