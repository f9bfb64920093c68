"""Maps changed file paths onto the service roots they belong to."""

from typing import List, Sequence


def resolve(changed_files: Sequence[str], service_roots: Sequence[str]) -> List[str]:
    """
    Return the service roots that contain at least one changed file.

    A root matches only files strictly inside its directory, so "auth" does
    not match "auth-service/app.py". The result keeps the order of
    ``service_roots``; duplicate roots are passed through as given.
    """
    if not service_roots:
        return []

    impacted = []
    for root in service_roots:
        prefix = f"{root}/"
        if any(
            path.startswith(prefix) and len(path) > len(prefix)
            for path in changed_files
        ):
            impacted.append(root)
    return impacted
