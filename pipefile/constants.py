"""
pipefile.constants - package-wide settings

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

VERSION = '0.3.0'

# buffer size used by file writers when a size of 0 is requested
DEFAULT_BUFFER_SIZE = 16384

# directories searched, in order, for codec programs
BIN_DIRS = ('/bin', '/usr/bin', '/usr/local/bin')

# chunk size for copying between python streams and process pipes
COPY_CHUNK_SIZE = 128 * 1024

GZIP_COMPRESSION_LEVEL = 9
