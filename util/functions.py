# util/functions.py
def slugify(text: str) -> str:
    """
    - Lowercase `text` and collapse every run of non-alphanumerics into a single '-'.
    - Strips leading/trailing dashes ("About Us" -> "about-us").
    """
    out: list[str] = []
    dash = False
    for ch in text.strip().lower():
        if ch.isascii() and ch.isalnum():
            out.append(ch)
            dash = False
        elif out and not dash:
            out.append("-")
            dash = True
    return "".join(out).strip("-")


def title_label(page_id: str) -> str:
    """
    - Split an id on '-', '_' and '/' and capitalize each token.
    - "about-us" -> "About Us", "blog/posts" -> "Blog Posts".
    """
    tokens = page_id.replace("_", "-").replace("/", "-").split("-")
    return " ".join(t[:1].upper() + t[1:] for t in tokens if t)


def escape_glob(text: str) -> str:
    # Redis MATCH patterns treat these as glob metacharacters.
    out = []
    for ch in text:
        if ch in "*?[]\\":
            out.append("\\")
        out.append(ch)
    return "".join(out)


def is_slug_literal(text: str) -> bool:
    return bool(text) and all(
        (ch.isascii() and ch.isalnum()) or ch in "-_" for ch in text
    )
