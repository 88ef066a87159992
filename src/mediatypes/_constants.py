"""Internal constants shared across the library."""

APACHE_URL = "https://raw.githubusercontent.com/apache/httpd/trunk/docs/conf/mime.types"
DEBIAN_URL = "https://salsa.debian.org/debian/media-types/-/raw/master/mime.types"
NGINX_URL = "https://raw.githubusercontent.com/nginx/nginx/master/conf/mime.types"

#: Default interval between scheduled synchronizations (one day, in seconds).
DEFAULT_UPDATE_INTERVAL: float = 24 * 3600.0

DEFAULT_REQUEST_TIMEOUT: float = 30.0
DEFAULT_SNAPSHOT_NAME = "snapshot.json"
DEFAULT_DATA_DIR = "~/.cache/mediatypes"

VERSION_HEADER = "ETag"
USER_AGENT = "mediatypes"
