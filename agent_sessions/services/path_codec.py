"""Conversion between project paths and log store directory names.

The CLI stores each project's logs in a directory named after the project
path with every "/" (and any other character outside [A-Za-z0-9-]) replaced
by "-". A "/." (hidden folder) therefore becomes "--":

    /Users/u/Projects/app/.worktrees/feature
    -> -Users-u-Projects-app--worktrees-feature

Decoding is lossy because project names may contain dashes themselves, so
``dir_name_to_path`` is only a hint. Callers confirm a match by encoding the
candidate path and comparing against the directory name.
"""

import re

PROJECTS_ROOT_MARKERS = ("Projects", "UnityProjects")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9-]")


def path_to_dir_name(path: str) -> str:
    """Encode a filesystem path as a log store directory name.

    Args:
        path: Absolute project path (e.g., "/Users/u/Projects/app").

    Returns:
        Directory name (e.g., "-Users-u-Projects-app").
    """
    return _UNSAFE_CHARS.sub("-", path)


def dir_name_to_path(dir_name: str) -> str:
    """Decode a log store directory name back to a project path.

    Everything up to and including the first projects-root marker
    ("Projects" or "UnityProjects") is taken literally as path segments.
    After it, single dashes are kept inside the project name and a double
    dash opens a hidden folder, inside which every dash starts a new
    subfolder. Without a marker, every dash becomes a separator.

    Args:
        dir_name: Directory name (e.g., "-Users-u-Projects-my-app--worktrees-x").

    Returns:
        Best-guess path (e.g., "/Users/u/Projects/my-app/.worktrees/x").
    """
    name = dir_name[1:] if dir_name.startswith("-") else dir_name
    if not name:
        return ""

    parts = name.split("-")
    marker_idx = next(
        (i for i, part in enumerate(parts) if part in PROJECTS_ROOT_MARKERS),
        None,
    )

    if marker_idx is None:
        return "/" + name.replace("-", "/")

    path = "/" + "/".join(parts[: marker_idx + 1])
    tail = parts[marker_idx + 1 :]
    if not tail:
        return path

    segments: list[str] = []
    current = ""
    in_hidden_folder = False

    for part in tail:
        if not part:
            # Double dash: the next part opens a hidden folder
            if current:
                segments.append(current)
                current = ""
            in_hidden_folder = True
        elif in_hidden_folder:
            if not current:
                current = f".{part}"
            else:
                segments.append(current)
                current = part
        elif not current:
            current = part
        else:
            current = f"{current}-{part}"

    if current:
        segments.append(current)

    return f"{path}/" + "/".join(segments)
