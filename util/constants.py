# util/constants.py
from typing import Final, FrozenSet

# Lowercased names that read as a routed page rather than a building block.
PAGE_NAMES: Final[FrozenSet[str]] = frozenset(
    {
        "home",
        "about",
        "contact",
        "products",
        "services",
        "pricing",
        "faq",
        "blog",
        "portfolio",
        "gallery",
        "members",
        "shop",
        "checkout",
        "cart",
        "login",
        "signup",
        "dashboard",
        "settings",
        "profile",
        "terms",
        "privacy",
        "notfound",
        "error",
    }
)

COMPONENT_NAMES: Final[FrozenSet[str]] = frozenset(
    {
        "navbar",
        "nav",
        "header",
        "footer",
        "hero",
        "sidebar",
        "card",
        "button",
        "modal",
        "dialog",
        "form",
        "input",
        "productcard",
        "productgrid",
        "testimonials",
        "features",
        "cta",
        "banner",
        "section",
    }
)


class VirtualPaths:
    APP = "/App.tsx"
    PREAMBLE = "/imports.ts"
    PAGES = "/pages"
    COMPONENTS = "/components"


class RemoteURIs:
    REST = "/rest/v1"
    PROJECTS = REST + "/vibecoder_projects"
    MESSAGES = REST + "/vibecoder_messages"
