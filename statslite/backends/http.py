"""
HTTP Backend Adapter

Submits statistics to the MCStats report endpoint. One POST per
submission, gzip-compressed when possible, no connection reuse.
"""

import gzip
import http.client
import json
import logging
import os
import platform
import ssl
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, Optional

import certifi

from ..config import Config
from ..errors import CompressionError, SubmitError
from ..hosts.base import HostMetrics

REVISION = 7  # Plugin-Metrics revision
BASE_URL = "http://report.mcstats.org"
REPORT_URL = BASE_URL + "/plugin/"

SSL_CONTEXT = ssl.create_default_context(cafile=certifi.where())


def normalize_arch(arch: str) -> str:
    """Report amd64 the way the collector expects (x86_64)"""
    return "x86_64" if arch == "amd64" else arch


def _os_name_and_version():
    os_name = platform.system()
    if os_name == "Darwin":
        mac_ver = platform.mac_ver()[0]  # e.g., "15.4"
        return "Mac OS X", mac_ver if mac_ver else platform.release()
    return os_name, platform.release()


def collect_environment() -> Dict[str, Any]:
    """Collect operating system and runtime information"""
    os_name, os_version = _os_name_and_version()
    return {
        "osname": os_name,
        "osarch": normalize_arch(platform.machine()),
        "osversion": os_version,
        "cores": os.cpu_count() or 1,
        "runtime_version": platform.python_version(),
    }


def build_payload(config: Config, ping: bool, metrics: HostMetrics,
                  environment: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build the submission payload

    Args:
        config: Current configuration (provides the unique ID)
        ping: True for every submission after the first in a session
        metrics: Host metrics
        environment: System information (collected when omitted)

    Returns:
        Ordered payload dictionary
    """
    if environment is None:
        environment = collect_environment()

    payload = {
        # Plugin and server information
        "guid": config.unique_id,
        "plugin_version": metrics.plugin_version,
        "server_version": metrics.server_version,
        "players_online": metrics.online_players,
        "auth_mode": metrics.online_mode,
        # System information
        "osname": environment["osname"],
        "osarch": environment["osarch"],
        "osversion": environment["osversion"],
        "cores": int(environment["cores"]),
        "runtime_version": environment["runtime_version"],
    }
    if ping:
        payload["ping"] = True
    return payload


def encode_payload(payload: Dict[str, Any]) -> bytes:
    """Serialize a payload to compact UTF-8 JSON"""
    return json.dumps(payload, separators=(",", ":")).encode('utf-8')


def gzip_compress(data: bytes) -> bytes:
    """
    Compress request body

    Raises:
        CompressionError: If compression fails
    """
    try:
        return gzip.compress(data)
    except (OSError, ValueError, TypeError) as e:
        raise CompressionError(str(e)) from e


def classify_response(line: Optional[str]):
    """
    Interpret the first line of a server reply

    Args:
        line: First response line, None if the body was empty

    Raises:
        SubmitError: If the server reported an error
    """
    if not line:
        raise SubmitError("null")
    if line.startswith("ERR"):
        raise SubmitError(line)
    if line.startswith("7"):
        # Legacy error code prefix
        raise SubmitError(line[2:] if line.startswith("7,") else line[1:])


class HTTPBackend:
    """HTTP backend for the MCStats report endpoint"""

    def __init__(self, report_url: str = REPORT_URL, timeout: float = 10.0,
                 debug: bool = False, logger: Optional[logging.Logger] = None):
        """
        Initialize HTTP backend

        Args:
            report_url: Endpoint prefix, the URL-encoded plugin name is appended
            timeout: Socket timeout in seconds
            debug: Log payloads and server replies
            logger: Logger for debug output
        """
        self.report_url = report_url
        self.timeout = timeout
        self.debug = debug
        self.logger = logger or logging.getLogger("statslite.http")

    def url_for(self, plugin_name: str) -> str:
        """Full report URL for a plugin"""
        return self.report_url + urllib.parse.quote_plus(plugin_name)

    def submit(self, config: Config, ping: bool, metrics: HostMetrics):
        """
        Submit one statistics report

        Args:
            config: Current configuration
            ping: Whether this is a follow-up report in the session
            metrics: Host metrics

        Raises:
            SubmitError: On network failure or an error reply
        """
        body = encode_payload(build_payload(config, ping, metrics))
        if self.debug:
            self.logger.debug("Generated json request: %s", body.decode('utf-8'))

        headers = {
            "User-Agent": f"MCStats/{REVISION}",
            "Content-Type": "application/json",
        }

        try:
            body = gzip_compress(body)
            headers["Content-Encoding"] = "gzip"
        except CompressionError:
            pass  # Send uncompressed

        headers["Content-Length"] = str(len(body))
        headers["Accept"] = "application/json"
        headers["Connection"] = "close"

        url = self.url_for(metrics.plugin_name)
        if self.debug:
            self.logger.debug("Sending %d bytes to %s", len(body), url)

        req = urllib.request.Request(url, data=body, headers=headers, method='POST')

        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=SSL_CONTEXT) as response:
                raw = response.readline()
                status, reason = response.status, response.reason
        except urllib.error.HTTPError as e:
            raise SubmitError(f"HTTP {e.code} - {e.reason}") from e
        except urllib.error.URLError as e:
            raise SubmitError(f"Connection error: {e.reason}") from e
        except http.client.HTTPException as e:
            # Malformed status line, truncated body, oversized header
            raise SubmitError(f"Invalid response: {e!r}") from e
        except OSError as e:
            # Timeouts, resets, DNS failures surfacing outside URLError
            raise SubmitError(f"Connection error: {e}") from e

        line = raw.decode('utf-8', errors='replace').rstrip("\r\n") if raw else None
        if self.debug:
            self.logger.debug("Server replied with '%s' (%s - %s)", line, status, reason)

        classify_response(line)
