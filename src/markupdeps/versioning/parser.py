"""Package reference parsing."""

from typing import Optional

from ..constants import Constants
from .models import PackageRef
from .semver import parse_range


def parse_package_ref(ref: str) -> Optional[PackageRef]:
    """Parse a package reference of the form ``name`` or ``name@range``.

    Splits on the first ``@``; a missing range means ``*``.

    Returns:
        PackageRef, or None if the reference is invalid (empty name or a
        range that does not parse). Never raises.
    """
    if not isinstance(ref, str):
        return None
    name, _, text_range = ref.partition("@")
    name = name.strip()
    text_range = text_range.strip() or Constants.ANY_RANGE
    if not name:
        return None

    spec = parse_range(text_range)
    if spec is None:
        return None
    return PackageRef(name=name, text_range=text_range, range=spec)
