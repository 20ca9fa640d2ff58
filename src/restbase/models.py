"""Canonical Pydantic models shared across all restbase modules.

These are the configuration models serialised as JSON in the user's config
directory:

* :class:`RequestConfig`, :class:`CacheConfig`, :class:`ConnectivityConfig`
  -- per-profile settings for the transport, the response cache, and the
  connectivity probe.
* :class:`ServiceProfile` -- one API target (base URL plus static headers).
* :class:`OutputConfig` and :class:`GlobalConfig` -- user-wide defaults.

All models use Pydantic v2. :class:`ServiceProfile` uses ``extra="allow"``
so that unknown keys written by newer versions survive a load/save cycle.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestConfig(BaseModel):
    """HTTP transport settings applied to every call made with a profile."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow 3xx redirects")


class CacheConfig(BaseModel):
    """Local response cache settings for a :class:`ServiceProfile`."""

    enabled: bool = Field(default=True, description="Enable the local response cache")
    default_hours: int = Field(
        default=24, description="Cache duration used when a fetch does not pass one"
    )


class ConnectivityConfig(BaseModel):
    """How the client decides whether the internet is reachable.

    The probe opens a TCP connection to ``host:port``. When ``assume_online``
    is set, no probe is made and the network is always treated as reachable.
    """

    host: str = Field(default="1.1.1.1", description="Host used for the reachability probe")
    port: int = Field(default=53, description="TCP port used for the reachability probe")
    timeout: float = Field(default=3.0, description="Probe timeout in seconds")
    assume_online: bool = Field(default=False, description="Skip the probe entirely")


class ServiceProfile(BaseModel):
    """Per-API profile stored as JSON under the ``profiles/`` config directory.

    The base URL and headers are fixed for the lifetime of a client built
    from the profile. ``Accept: application/json`` is always sent in
    addition to ``headers``.

    See Also:
        :func:`~restbase.config.load_profile`: Deserialise a profile by name.
        :func:`~restbase.config.save_profile`: Persist a profile to disk.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    base_url: str = Field(description="Absolute base URI every resource is resolved against")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Static headers sent with every request"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    connectivity: ConnectivityConfig = Field(default_factory=ConnectivityConfig)

    @field_validator("base_url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/restbase/config.json``.

    Fields here have the lowest precedence and can be overridden by the
    project file, environment variables, or CLI flags. See
    :func:`~restbase.config.resolve_config` for the full precedence chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)
