# repository/namespaces.py
from typing import Final, Optional, Tuple

ROOT: Final[str] = "vibecoder"
SEP: Final[str] = ":"
GLOBAL: Final[str] = "global"  # reserved: never a real project id

SCOPED: Final[str] = f"{ROOT}{SEP}"  # every keyer-produced key starts here
PENDING_UPLOADS: Final[str] = "pending_uploads"

# Raw key prefixes owned by the workspace; purge_all removes anything under them.
WORKSPACE_PREFIXES: Final[Tuple[str, ...]] = (
    "vibecoder-files-",
    "vibecoder-chat-",
    "vibecoder-state-",
    "sandpack-",
    SCOPED,
)

# Substrings identifying sandbox runtime databases among everything the runtime lists.
SANDBOX_DB_MARKERS: Final[Tuple[str, ...]] = (
    "sandpack",
    "CSB",
    "codesandbox",
    "browser-fs",
    "keyval-store",
)

# Deleted directly when the runtime cannot enumerate its databases.
WELL_KNOWN_SANDBOX_DBS: Final[Tuple[str, ...]] = (
    "sandpack-bundler-cache",
    "sandpack-npm-cache",
    "codesandbox-bundler",
    "browser-fs-access",
    "CSB_V8_CACHE",
    "keyval-store",
)


def scoped_key(logical_key: str, project_id: Optional[str] = None) -> str:
    """
    Map (logical_key, project_id) to a raw storage key.

    Missing or empty project ids share the global namespace. Project ids are embedded
    verbatim and must not contain SEP, which keeps the mapping injective.
    """
    return f"{SCOPED}{logical_key}{SEP}{project_id or GLOBAL}"


def is_sandbox_database(name: str) -> bool:
    return any(marker in name for marker in SANDBOX_DB_MARKERS)
