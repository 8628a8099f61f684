"""Decide which files of an imported project are worth copying."""

from __future__ import annotations

import re

# Generated, cached, or machine-local directories.  Matched against every
# path segment.
EXCLUDED_DIRECTORIES = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        ".astro",
        ".vercel",
        ".netlify",
        "build",
        "out",
        ".idea",
        ".vscode",
        ".vs",
        ".cache",
        ".nx",
        ".turbo",
        ".next",
        ".nuxt",
        "coverage",
        ".nyc_output",
    }
)

# Matched against the file name only, in order.
EXCLUDED_FILE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # Lock files
    re.compile(r"^package-lock\.json$"),
    re.compile(r"^yarn\.lock$"),
    re.compile(r"^pnpm-lock\.yaml$"),
    re.compile(r"^bun\.lockb$"),
    # OS files
    re.compile(r"^\.DS_Store$"),
    re.compile(r"^Thumbs\.db$"),
    re.compile(r"^desktop\.ini$"),
    # Editor backups
    re.compile(r"\.swp$"),
    re.compile(r"\.swo$"),
    re.compile(r"~$"),
    # Logs
    re.compile(r"^npm-debug\.log"),
    re.compile(r"^yarn-debug\.log"),
    re.compile(r"^yarn-error\.log"),
    re.compile(r"^\.pnpm-debug\.log"),
    re.compile(r"\.log$"),
    # Real environment files; .env.example and .env.template stay.
    re.compile(r"^\.env$"),
    re.compile(r"^\.env\.local$"),
    re.compile(r"^\.env\.development\.local$"),
    re.compile(r"^\.env\.test\.local$"),
    re.compile(r"^\.env\.production\.local$"),
)


def should_include(path: str) -> bool:
    """Return True if *path* (relative to the copy root) should be copied.

    A path is excluded when any segment is in :data:`EXCLUDED_DIRECTORIES`
    (``src/node_modules/x`` included) or when its file name matches one of
    :data:`EXCLUDED_FILE_PATTERNS`.  The empty path is included.
    """
    if not path:
        return True

    parts = path.replace("\\", "/").split("/")
    if any(part in EXCLUDED_DIRECTORIES for part in parts):
        return False

    filename = parts[-1]
    return not any(pattern.search(filename) for pattern in EXCLUDED_FILE_PATTERNS)
