"""
Best-effort IP-to-location lookup for login provenance.

Resolution never fails the caller: any error, timeout or unusable address
yields the all-"Unknown" record. Two backends are supported:

- a local MaxMind GeoLite2 City database (``geoip2``), used when a database
  path is configured; it carries no ISP data.
- an HTTP geolocation API (``httpx``), ip-api.com by default.
"""

import asyncio
import ipaddress
import logging
from dataclasses import dataclass
from typing import Optional, TypedDict

import geoip2.database
import geoip2.errors
import httpx
from fastapi import Request

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
GEO_FIELDS = ("country", "region", "city", "isp")


class GeoRecord(TypedDict):
    """Geographic/ISP information for a client address."""
    country: str
    region: str
    city: str
    isp: str


def default_geo_record() -> GeoRecord:
    """The record used whenever a lookup cannot produce real data."""
    return GeoRecord(country=UNKNOWN, region=UNKNOWN, city=UNKNOWN, isp=UNKNOWN)


def merge_geo_record(partial: Optional[dict]) -> GeoRecord:
    """Fill a possibly partial lookup answer onto the default record."""
    record = default_geo_record()
    if not partial:
        return record
    for field in GEO_FIELDS:
        value = partial.get(field)
        if isinstance(value, str) and value.strip():
            record[field] = value.strip()
    return record


@dataclass(frozen=True)
class GeoLookupResult:
    """Outcome of a lookup: the record plus whether it came from real data."""
    record: GeoRecord
    resolved: bool
    error: Optional[str] = None


class GeoResolver:
    """
    Maps a client network address to a GeoRecord.
    """

    # Addresses in these ranges never leave the process
    _PRIVATE_RANGES = [
        ipaddress.ip_network("0.0.0.0/8"),
        ipaddress.ip_network("10.0.0.0/8"),
        ipaddress.ip_network("100.64.0.0/10"),
        ipaddress.ip_network("172.16.0.0/12"),
        ipaddress.ip_network("192.168.0.0/16"),
        ipaddress.ip_network("127.0.0.0/8"),
        ipaddress.ip_network("169.254.0.0/16"),
        ipaddress.ip_network("::/128"),
        ipaddress.ip_network("::1/128"),
        ipaddress.ip_network("fc00::/7"),
        ipaddress.ip_network("fe80::/10"),
    ]

    def __init__(
        self,
        lookup_url: str,
        timeout_seconds: float = 3.0,
        database_path: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize GeoResolver.

        Args:
            lookup_url: HTTP lookup URL template containing "{ip}"
            timeout_seconds: Upper bound for a single lookup
            database_path: Path to a GeoLite2 City database file
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._lookup_url = lookup_url
        self._timeout = timeout_seconds
        self._transport = transport
        self._reader = None

        if database_path:
            try:
                self._reader = geoip2.database.Reader(database_path)
                logger.info(f"GeoIP database loaded from {database_path}")
            except Exception as e:
                logger.warning(f"Failed to load GeoIP database, using HTTP lookup: {e}")

    async def resolve(self, ip_address: str) -> GeoRecord:
        """Total lookup: always returns a fully populated record."""
        result = await self.lookup(ip_address)
        return result.record

    async def lookup(self, ip_address: str) -> GeoLookupResult:
        """
        Look up an address, reporting whether real data was found.

        Never raises.
        """
        address = self.normalize_address(ip_address)
        if not address:
            return GeoLookupResult(default_geo_record(), False, "malformed address")

        if self._is_private_ip(address):
            return GeoLookupResult(default_geo_record(), False, "private address")

        try:
            partial = await asyncio.wait_for(self._fetch(address), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Geo lookup timed out for {address} after {self._timeout}s")
            return GeoLookupResult(default_geo_record(), False, "timeout")
        except Exception as e:
            logger.warning(f"Geo lookup failed for {address}: {e}")
            return GeoLookupResult(default_geo_record(), False, str(e) or e.__class__.__name__)

        return GeoLookupResult(merge_geo_record(partial), True)

    async def _fetch(self, address: str) -> dict:
        if self._reader is not None:
            return await asyncio.to_thread(self._fetch_local, address)
        return await self._fetch_remote(address)

    def _fetch_local(self, address: str) -> dict:
        try:
            response = self._reader.city(address)
        except geoip2.errors.AddressNotFoundError:
            raise LookupError(f"{address} not in GeoIP database")
        return {
            "country": response.country.name,
            "region": response.subdivisions.most_specific.name,
            "city": response.city.name,
        }

    async def _fetch_remote(self, address: str) -> dict:
        url = self._lookup_url.format(ip=address)
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise ValueError("unexpected geo lookup payload")
        if data.get("status") == "fail":
            raise LookupError(data.get("message") or "lookup refused")

        return {
            "country": data.get("country"),
            "region": data.get("regionName") or data.get("region"),
            "city": data.get("city"),
            "isp": data.get("isp"),
        }

    @staticmethod
    def normalize_address(ip_address: Optional[str]) -> Optional[str]:
        """Return a canonical address string, or None if it is not an IP."""
        if not ip_address:
            return None
        try:
            ip = ipaddress.ip_address(ip_address.strip())
        except ValueError:
            return None
        if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped:
            ip = ip.ipv4_mapped
        return str(ip)

    def _is_private_ip(self, ip_address: str) -> bool:
        """Check if an IP address is private/localhost."""
        try:
            ip = ipaddress.ip_address(ip_address)
        except ValueError:
            return False
        return any(ip in network for network in self._PRIVATE_RANGES if ip.version == network.version)

    @staticmethod
    def extract_client_address(request: Request) -> str:
        """Extract the real client address, honouring reverse-proxy headers."""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return GeoResolver.normalize_address(first) or first

        real_ip = request.headers.get("X-Real-IP")
        if real_ip and real_ip.strip():
            return GeoResolver.normalize_address(real_ip) or real_ip.strip()

        if request.client and request.client.host:
            host = request.client.host
            return GeoResolver.normalize_address(host) or host

        return "0.0.0.0"

    def close(self) -> None:
        """Close the GeoIP database reader."""
        if self._reader:
            self._reader.close()
            self._reader = None
