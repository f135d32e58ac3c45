import os
import sys
from typing import Tuple

import requests

DEFAULT_HEALTH_URL = 'http://localhost:8080/health'


def check_http_service(name: str, url: str) -> Tuple[bool, str]:
    try:
        response = requests.get(url, timeout=5)
        if response.status_code == 200:
            return True, f"{name} is healthy"
        return False, f"{name} returned status code {response.status_code}"
    except requests.RequestException as e:
        return False, f"{name} check failed: {str(e)}"


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    # Allow overriding via environment variable; an explicit argument wins.
    url = argv[0] if argv else os.getenv('INTAKE_HEALTH_URL', DEFAULT_HEALTH_URL)

    healthy, message = check_http_service('EPUB Intake', url)
    status = "✓" if healthy else "✗"
    print(f"{status} {message}")
    return 0 if healthy else 1


if __name__ == "__main__":
    sys.exit(main())
