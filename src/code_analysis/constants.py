"""
Constants for code analysis.
Contains file extension constants, language mappings and scanner defaults.
"""

# Supported file extensions with leading dots
EXTENSIONS: list[str] = [
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".ts",
    ".tsx",
    ".mts",
    ".cts",
    ".php",
]

# Source language reported for each supported extension
LANGUAGE_NAMES: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".php": "php",
}

UNKNOWN_LANGUAGE = "unknown"

# tree-sitter grammar used for each supported extension.
# tsx accepts plain JavaScript, JSX and TypeScript alike
GRAMMAR_NAMES: dict[str, str] = {
    ".js": "tsx",
    ".jsx": "tsx",
    ".mjs": "tsx",
    ".cjs": "tsx",
    ".ts": "tsx",
    ".tsx": "tsx",
    ".mts": "tsx",
    ".cts": "tsx",
    ".php": "php",
}

# Extensions handled by the ECMAScript/TypeScript parser
ECMASCRIPT_EXTENSIONS: list[str] = [
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".ts",
    ".tsx",
    ".mts",
    ".cts",
]

# Extensions handled by the PHP parser
PHP_EXTENSIONS: list[str] = [".php"]

# Path segments skipped while scanning (substring match on each segment)
DEFAULT_EXCLUDE_PATTERNS: list[str] = [
    "node_modules",
    ".git",
    ".next",
    "dist",
    "build",
    ".cache",
    "coverage",
    ".turbo",
    ".vercel",
    "__pycache__",
    "venv",
    ".env",
    ".env.local",
    ".DS_Store",
]

DEFAULT_MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10 MiB

DEFAULT_MAX_DEPTH: int = 10

# Names used when a declaration has no name of its own
ANONYMOUS_NAME = "anonymous"
ANONYMOUS_CLASS_NAME = "AnonymousClass"
ANONYMOUS_INTERFACE_NAME = "AnonymousInterface"
DEFAULT_EXPORT_NAME = "default"
UNNAMED_PARAM = "param"
