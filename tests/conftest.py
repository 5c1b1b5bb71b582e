import os
import sys
import warnings
from pathlib import Path

warnings.filterwarnings("ignore", category=DeprecationWarning)

# Set test environment variables before any `app` module reads configuration
os.environ.update(
    {
        "LIVEKIT_WS_URL": "wss://livekit.test",
        "LIVEKIT_API_KEY": "test-api-key",
        "LIVEKIT_API_SECRET": "test-api-secret-with-enough-length-for-hs256",
        "SESSION_SECRET": "",
        "AVATAR_BASE_URL": "https://api.multiavatar.com",
        "LOGFIRE_ENABLE": "false",
    }
)

# Ensure the project root is on sys.path so `app` packages resolve
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from tests.fixtures.livekit_fixtures import *  # noqa: E402, F403
