"""
StatsLite Configuration Example

Copy this file to 'statslite_config.py' somewhere on the import path
to override the client defaults.
"""

# Collection endpoint (plugin name is appended)
REPORT_URL = 'http://report.mcstats.org/plugin/'

# Seconds to wait for the server before giving up on a submission
TIMEOUT = 10.0

# Directory holding statslite.properties (defaults to the working directory)
CONFIG_DIR = None

# Log payloads, server replies and every submission failure
DEBUG = False
