from urllib3.util.retry import Retry
import requests
from requests.adapters import HTTPAdapter

from stackoverflow_tags import __version__


# Retries and pacing belong to the pagination driver, so the transport
# makes exactly one attempt per call.
NO_RETRY_STRATEGY = Retry(total=0, read=False)


def new_session() -> requests.Session:
    """Create a new requests session that never retries on its own"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=NO_RETRY_STRATEGY)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Set default headers
    session.headers.update(
        {
            "User-Agent": f"stackoverflow-tags/{__version__}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
    )

    return session
