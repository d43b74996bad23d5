import os
from typing import Final

######################################
# Node general settings:
ONE_BLOCK_SEC: Final[float] = float(os.environ.get("NODE_BLOCK_SEC", "15"))
DEFAULT_BLOCK_WINDOW_SIZE: Final[int] = 10
DEFAULT_NODE_URI_PATH: Final[str] = os.path.join("~", ".mix-client", "node-uri")

_MAJOR_VER = 0
_MINOR_VER = 3
_BUILD_VER = 0
MIX_CLIENT_VER = f"v{_MAJOR_VER}.{_MINOR_VER}.{_BUILD_VER}"

MIX_CLIENT_PKG_VER = f"Mix-Client/{MIX_CLIENT_VER}"
