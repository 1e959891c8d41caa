import fnmatch

SUPPORTED_EXTENSIONS = {
    ".js",
    ".ts",
    ".jsx",
    ".tsx",
    ".html",
    ".css",
}

# Directory names whose contents are never reviewed, wherever they appear.
EXCLUDED_DIRS = {
    "node_modules",
    "dist",
    "build",
}


def is_supported_file(file_name: str) -> bool:
    return any(file_name.lower().endswith(ext) for ext in SUPPORTED_EXTENSIONS)


def in_excluded_dir(file_name: str) -> bool:
    parts = file_name.split("/")[:-1]
    return any(part in EXCLUDED_DIRS for part in parts)


def is_excluded(filename: str, patterns: list[str]) -> bool:
    """Return True if filename matches any user-configured exclude pattern.

    Supports:
    - fnmatch globs on the full path: "src/generated/*.js"
    - fnmatch globs on the basename: "*.min.js"
    - Directory names/prefixes: "vendor/", "legacy" (matches any file within that tree)
    """
    for pattern in patterns:
        if fnmatch.fnmatch(filename, pattern):
            return True
        # Basename match: "*.min.js" matches "static/app.min.js"
        if fnmatch.fnmatch(filename.rsplit("/", 1)[-1], pattern):
            return True
        # Directory prefix: "vendor" or "vendor/" matches "web/vendor/lib.js"
        prefix = pattern.rstrip("/") + "/"
        if filename.startswith(prefix) or ("/" + prefix) in filename:
            return True
    return False
