"""Field validators shared by the request models."""

import re

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(v: str) -> str:
    v = (v or "").strip().lower()
    if not EMAIL_RE.match(v):
        raise ValueError("invalid email")
    return v


def strip_required(v: str | None) -> str | None:
    # None is left alone so partial updates can tell "unset" from "blank".
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v
