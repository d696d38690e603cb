import fnmatch

AUDITED_EXTENSIONS = (".c", ".cpp", ".h", ".go")


def is_excluded(file_name: str, patterns: list[str]) -> bool:
    """Return True if file_name matches any exclude pattern.

    Supports:
    - fnmatch globs on the full path: "src/generated/*.cpp"
    - fnmatch globs on the basename: "*_test.go", "*.pb.h"
    - Directory names/prefixes: "third_party/", "vendor" (matches any file within that tree)
    """
    for pattern in patterns:
        if fnmatch.fnmatch(file_name, pattern):
            return True
        if fnmatch.fnmatch(file_name.rsplit("/", 1)[-1], pattern):
            return True
        prefix = pattern.rstrip("/") + "/"
        if file_name.startswith(prefix) or ("/" + prefix) in file_name:
            return True
    return False


def is_audited_file(file_name: str, extensions=AUDITED_EXTENSIONS, exclude: list[str] | None = None) -> bool:
    """Return True if activating this file should load its audit state.

    An empty ``extensions`` collection lets every file through.
    """
    if extensions and not any(file_name.lower().endswith(ext.lower()) for ext in extensions):
        return False
    return not is_excluded(file_name, exclude or [])
