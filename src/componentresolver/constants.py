from enum import Enum

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "fc": "componentresolver.cache.file_cache",
    "cache": "componentresolver.cache",
    "watch": "componentresolver.cache.watcher",
    "wt": "componentresolver.cache.watcher",
    "pat": "componentresolver.indexes.pattern",
    "pattern": "componentresolver.indexes.pattern",
    "tpl": "componentresolver.indexes.templates",
    "ex": "componentresolver.indexes.examples",
    "examples": "componentresolver.indexes.examples",
    "readme": "componentresolver.indexes.readme",
    "rdm": "componentresolver.indexes.readme",
    "coord": "componentresolver.coordinator",
    "inv": "componentresolver.coordinator",
    "res": "componentresolver.resolver",
    "io": "componentresolver.io",
    "fs": "componentresolver.io.fs",
    "conf": "componentresolver.config",
}

# Top-level modules within componentresolver for auto-prefixing
KNOWN_TOP_MODULES = {
    "cache",
    "indexes",
    "io",
    "utils",
    "config",
    "coordinator",
    "resolver",
    "models",
    "cli",
}

LOG_LEVELS_ENV = "COMPONENT_RESOLVER_LOG_LEVELS"


# --- Default glob expressions (relative to the root directory) ---
DEFAULT_PATTERN_EXPRESSION = "*/*/pattern.json"
DEFAULT_MAIN_TEMPLATE = "*/*/*.hbs"
DEFAULT_SUB_TEMPLATE = "*/*/elements/*/*.hbs"
DEFAULT_README_EXPRESSION = "**/readme.md"
DEFAULT_EXAMPLE_FOLDER_NAME = "_example"
EXAMPLE_EXPRESSION_TEMPLATE = "*/*/{folder}/*.*"

README_FILENAME = "readme.md"
HIDDEN_PREFIX = "_"
TEXT_ENCODING = "utf-8"


# --- Feature-disabled messages ---
EXAMPLES_DISABLED_MESSAGE = "component resolver: examples are deactivated"
READMES_DISABLED_MESSAGE = "component resolver: readmes are deactivated"


class CacheEvent(str, Enum):
    """Notifications emitted by a file cache"""
    ADDED = "add"
    CHANGED = "change"
    REMOVED = "unlink"
    # emitted after every ADDED/CHANGED/REMOVED
    ALL = "all"
    # emitted when the whole cache was dropped
    CACHE_REVOKED = "cache-revoked"


FILE_EVENTS = (CacheEvent.ADDED, CacheEvent.CHANGED, CacheEvent.REMOVED)


class IndexName(str, Enum):
    """Names of the file sets a resolver maintains"""
    PATTERNS = "patterns"
    MAIN_TEMPLATES = "main-templates"
    SUB_TEMPLATES = "sub-templates"
    EXAMPLES = "examples"
    READMES = "readmes"
