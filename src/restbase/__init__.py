"""restbase -- a JSON API client that keeps working offline.

restbase fetches JSON resources through a read-through local cache. A
fresh cached copy is served without touching the network; when no network
is reachable, any cached copy (even an expired one) is served instead of
failing; otherwise the resource is fetched over HTTP and cached for the
requested number of hours. Create, replace and delete calls go straight
to the API.

Typical library use::

    from restbase.cache import ResponseCache
    from restbase.client import ServiceClient
    from restbase.models import ServiceProfile

    profile = ServiceProfile(name="shop", base_url="https://api.example.com/")
    with ServiceClient(profile, cache=ResponseCache("/tmp/shop", profile.cache)) as client:
        item = client.fetch("items/1", Item, cache_duration=24)

The same is available from the shell::

    restbase profile add shop --base-url https://api.example.com/
    restbase get items/1

Modules:
    client: Blocking and async service clients.
    cache: Disk-backed response store and cache-key normalisation.
    connectivity: Internet reachability probes.
    models: Pydantic configuration models.
    config: XDG-aware configuration and profile management.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting and diagnostics.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"
